# 998244353 = 119 * 2^23 + 1, so it has roots of unity of every order 2^k, k <= 23
MOD = 998244353

# Below this operand length the direct O(n * m) convolution beats the transform
FFT_CUTOFF = 150
