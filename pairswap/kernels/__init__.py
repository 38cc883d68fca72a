"""
Kernel layer.

Pure, integer-only math used by the pool engine. These modules are designed to be:
- deterministic (checked unsigned arithmetic, floor rounding),
- easy to audit (explicit intermediate variables),
- small surface-area (pure functions, typed results).
"""
