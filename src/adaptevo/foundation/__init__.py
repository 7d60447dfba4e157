"""Foundation layer: exceptions, logging, collaborator protocols and shared utilities."""
