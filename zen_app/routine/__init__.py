"""
Routine model and sequence builder.

Expands the three-stage routine configuration into the flat, ordered task
list the scheduler walks through.
"""
