'''
Execution policies.

A policy is a hint: SEQ and UNSEQ run in the calling thread, PAR and
PAR_UNSEQ split the input into chunks handed to a thread pool.  Every
helper here returns what the sequential loop would return, except
`run_reduce`, whose grouping of operands is only meaningful for an
associative operation.
'''
import enum
import functools as ft
import heapq
import itertools as it
import os
import typing as tp
import warnings
from concurrent.futures import ThreadPoolExecutor

import attr

from errors import PolicyWarning

__all__ = [
    'Policy',
    'SEQ', 'UNSEQ', 'PAR', 'PAR_UNSEQ',
    'ParallelConfig',
    'get_config',
    'configure',
    'check_policy',
    'run_map',
    'run_any',
    'run_reduce',
    'run_sort',
]

T = tp.TypeVar('T')
R = tp.TypeVar('R')


class Policy(enum.Enum):
    SEQ       = 'seq'
    UNSEQ     = 'unseq'
    PAR       = 'par'
    PAR_UNSEQ = 'par_unseq'

    @property
    def parallel(self) -> bool:
        return self in (Policy.PAR, Policy.PAR_UNSEQ)

SEQ       = Policy.SEQ
UNSEQ     = Policy.UNSEQ
PAR       = Policy.PAR
PAR_UNSEQ = Policy.PAR_UNSEQ


def _clamp_workers(value):
    if value is not None and value < 1:
        warnings.warn(f'max_workers={value} clamped to 1', PolicyWarning)
        return 1
    return value

@attr.s(slots=True, auto_attribs=True, frozen=True)
class ParallelConfig:
    max_workers : tp.Optional[int] = attr.ib(default=None, converter=_clamp_workers)
    min_chunk   : int = attr.ib(default=2048, validator=attr.validators.instance_of(int))

    @min_chunk.validator
    def _check_min_chunk(self, attribute, value):
        if value < 1:
            raise ValueError(f'min_chunk must be positive, got {value}')

_config = ParallelConfig()

def get_config() -> ParallelConfig:
    return _config

def configure(**changes) -> ParallelConfig:
    '''Replace fields of the active config, returning the previous one'''
    global _config
    previous = _config
    _config = attr.evolve(_config, **changes)
    return previous


def check_policy(policy) -> Policy:
    if not isinstance(policy, Policy):
        raise TypeError(f'expected an execution policy, got {policy!r}')
    return policy

def _slice(values : tp.Sequence[T], start : int, stop : int) -> tp.List[T]:
    try:
        return list(values[start:stop])
    except TypeError:
        # deque has no slicing
        return list(it.islice(values, start, stop))

def _chunks(values : tp.Sequence[T], config : ParallelConfig) -> tp.List[tp.List[T]]:
    n = len(values)
    workers = config.max_workers or os.cpu_count() or 1
    size = max(config.min_chunk, -(-n // workers))
    return [_slice(values, start, start + size) for start in range(0, n, size)]

def _use_pool(values : tp.Sized, policy : Policy, config : ParallelConfig) -> bool:
    return policy.parallel and len(values) > config.min_chunk

def _pool(config : ParallelConfig) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=config.max_workers)


def run_map(fn : tp.Callable[[T], R], values : tp.Sequence[T], policy : Policy = SEQ) -> tp.Iterator[R]:
    '''fn over values, in order; lazy under sequential policies'''
    policy = check_policy(policy)
    config = get_config()
    if not _use_pool(values, policy, config):
        return map(fn, values)
    with _pool(config) as pool:
        parts = list(pool.map(lambda chunk: [fn(v) for v in chunk], _chunks(values, config)))
    return it.chain.from_iterable(parts)

def run_any(pred : tp.Callable[[T], bool], values : tp.Sequence[T], policy : Policy = SEQ) -> bool:
    policy = check_policy(policy)
    config = get_config()
    if not _use_pool(values, policy, config):
        return any(map(pred, values))
    with _pool(config) as pool:
        return any(pool.map(lambda chunk: any(map(pred, chunk)), _chunks(values, config)))

def run_reduce(
        op : tp.Callable[[R, T], R],
        init : R,
        values : tp.Sequence[T],
        policy : Policy = SEQ) -> R:
    policy = check_policy(policy)
    config = get_config()
    if not _use_pool(values, policy, config):
        return ft.reduce(op, values, init)
    with _pool(config) as pool:
        partials = list(pool.map(lambda chunk: ft.reduce(op, chunk), _chunks(values, config)))
    return ft.reduce(op, partials, init)

def run_sort(
        values : tp.Sequence[T],
        key : tp.Optional[tp.Callable[[T], tp.Any]] = None,
        reverse : bool = False,
        policy : Policy = SEQ) -> tp.Optional[tp.List[T]]:
    '''
        Sorted copy of values under a parallel policy, None when the caller
        should sort sequentially.

        Chunks are sorted independently then merged; heapq.merge takes equal
        keys from earlier chunks first, so the result is the stable sort.
    '''
    policy = check_policy(policy)
    config = get_config()
    if not _use_pool(values, policy, config):
        return None
    with _pool(config) as pool:
        parts = list(pool.map(lambda chunk: sorted(chunk, key=key, reverse=reverse), _chunks(values, config)))
    return list(heapq.merge(*parts, key=key, reverse=reverse))
