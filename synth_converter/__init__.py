"""
synth-converter - maps synthesis batch records onto the cat+ ontology.
"""

__version__ = "0.1.0"
