"""Recognizer adapters implementing the HypothesisSource protocol."""
from dictation.recognition.ScriptedRecognizer import ScriptedRecognizer

__all__ = ['ScriptedRecognizer']
