"""
Kernel layer.

`basic_amm/kernels/python/` holds the integer-only math the engines are built
on. Nothing here knows about pools, holders or ledgers.
"""
