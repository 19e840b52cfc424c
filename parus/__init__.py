"""Interpreter for the Parus postfix stack language: values, stack and lexicon, evaluator, built-in words and command line."""

__version__ = "1.1.0"
__all__ = ["cli", "evaluator", "predefined", "storage", "values"]