"""Evolutionary engine: components (populations, selection, fitness) and algorithms."""
