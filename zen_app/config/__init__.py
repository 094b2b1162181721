"""
Configuration layer: defaults, YAML settings file, validation and coercion
into the typed routine configuration.
"""
