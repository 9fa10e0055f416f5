"""可复现的随机排列与分页。

同一个 (seed, n) 永远得到同一个排列，客户端翻页时顺序稳定，
不同 seed 之间又各不相同。
"""

import random

MAX_SEED = 2**64


def permutation(seed: int, n: int) -> list[int]:
    """返回 [0, n) 的一个由 seed 唯一确定的随机排列。

    使用带种子的 Fisher-Yates 洗牌（random.Random.shuffle），
    每种排列出现的概率相同。
    """
    if not 0 <= seed < MAX_SEED:
        raise ValueError(f"seed must be in [0, 2**64), got {seed}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    indices = list(range(n))
    random.Random(seed).shuffle(indices)
    return indices


def page(seed: int, total: int, start: int, size: int) -> list[int]:
    """取排列中 [start, start + size) 的一段。

    start 越界或 size 非正时返回空列表。每次调用都重新计算排列，
    所以 total 变化后立即生效。
    """
    if start < 0:
        raise ValueError(f"start must be non-negative, got {start}")
    if start >= total or size <= 0:
        return []
    return permutation(seed, total)[start : min(start + size, total)]
