"""
The CONTROLLER layer decides what the model becomes: validation and commit,
debounced search, and the reactive conversion.
"""
