"""
Types used to index the blooms of block traces.
"""
