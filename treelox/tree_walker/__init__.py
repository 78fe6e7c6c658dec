"""
The run-time: values, control-flow signals, the evaluator, and the executive.
"""
