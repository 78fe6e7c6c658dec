"""
So that `python -m treelox program.lox` works the same as the console script.
"""
from .cmdline import main

main()
