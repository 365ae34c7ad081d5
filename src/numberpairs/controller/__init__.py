"""
The CONTROLLER layer turns input events (drags, key commands, addend changes)
into model updates and notifies the views through Qt signals.
"""
