"""
The MODEL layer contains pure data structures and layout logic.
It has NO knowledge of the GUI (Qt) or of input devices.
It deals with tokens, the track and the divider.
"""
