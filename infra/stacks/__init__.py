from .fastdata_stack import FastDataStack

__all__ = [
    "FastDataStack",
]
