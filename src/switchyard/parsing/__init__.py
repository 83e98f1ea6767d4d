"""Parsing: matcher string to tokens, tokens to an optimized program.

The grammar is an explicit state machine kept apart from lexical
scanning, so every illegal token sequence is reported at the first
offending character.
"""
