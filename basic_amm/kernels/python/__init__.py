"""
Integer kernels for pricing and share accounting.

- `precision_math`: square root, floor mul-div, min
- `cpmm_swap`: exact-in output, fee-less quote, slippage
- `lp_math`: deposit ratio, mint and burn

Every function takes and returns plain ints and never touches pool state.
"""
