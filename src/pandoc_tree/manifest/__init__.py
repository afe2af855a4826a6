"""Manifest grammar: tokenizer, parser and converter option decoder."""
