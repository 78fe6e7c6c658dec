"""
A tree-walking interpreter for Lox: scanner, parser, scope resolver, and evaluator.
"""
