"""
Thread configuration for the parallel kernels.

Kernels run their row loops with Numba's ``prange``.  The number of worker
threads for a call is resolved from, in order of priority:

1. the ``nthreads`` argument of the call;
2. a thread-local setting installed with :py:func:`set_threads` or
   :py:func:`use_threads`;
3. the ``SPDENSE_NUM_THREADS`` environment variable;
4. the size of Numba's thread pool (``NUMBA_NUM_THREADS``).

The result is always clamped to the pool size and to the number of rows of
work, so a call never starts more workers than it has rows.
"""

import os
import logging
import threading
from contextlib import contextmanager

import numba
from numba import config

_log = logging.getLogger(__name__)

ENV_VAR = 'SPDENSE_NUM_THREADS'
#: Rows handed to a worker at a time; small chunks give dynamic scheduling.
CHUNK_SIZE = 1

__all__ = [
    'max_threads',
    'default_threads',
    'set_threads',
    'use_threads',
    'get_threads',
    'effective_threads',
    'parallel_region',
    'arena_workers',
]


class ActiveThreads(threading.local):
    def __init__(self):
        self.__dict__.update({'nthreads': None})


__active = ActiveThreads()


def max_threads():
    "Get the size of Numba's thread pool."
    return config.NUMBA_NUM_THREADS


def default_threads():
    """
    Get the thread count used when nothing else is configured: the value of the
    ``SPDENSE_NUM_THREADS`` environment variable if set, and the thread pool
    size otherwise.
    """
    env = os.environ.get(ENV_VAR, None)
    if env:
        try:
            n = int(env)
        except ValueError:
            raise ValueError(f'{ENV_VAR}={env!r} is not an integer')
        return max(n, 1)
    return max_threads()


def set_threads(nthreads):
    """
    Set the thread count for calls made from the current thread.  Passing
    ``None`` restores the default.

    Args:
        nthreads(int or None): the number of threads.
    """
    if nthreads is not None and nthreads < 1:
        raise ValueError('thread count must be positive')
    __active.nthreads = nthreads


@contextmanager
def use_threads(nthreads):
    """
    Context manager to run code with a specified (thread-local) thread count.
    It calls :py:func:`set_threads`, and restores the previous setting when the
    context exits.
    """
    old = __active.nthreads
    try:
        set_threads(nthreads)
        yield
    finally:
        set_threads(old)


def get_threads():
    "Get the thread count in effect for the current thread."
    n = __active.nthreads
    if n is None:
        return default_threads()
    else:
        return n


def effective_threads(hint, nrows):
    """
    Resolve the number of workers for a call.

    Args:
        hint(int or None): the caller's requested thread count.
        nrows(int): the number of independent rows of work.

    Returns:
        int: a thread count in ``[1, min(max_threads(), nrows)]``.

    Raises:
        ValueError: if ``hint`` is less than 1.
    """
    if hint is not None and hint < 1:
        raise ValueError(f'thread count must be positive, got {hint}')
    n = get_threads() if hint is None else hint
    return max(1, min(n, max_threads(), nrows))


@contextmanager
def parallel_region(hint, nrows):
    """
    Context manager configuring Numba for one kernel call: it restricts the
    pool to :py:func:`effective_threads` workers and hands rows out in small
    chunks, so dense rows do not leave other workers idle.  Numba's previous
    settings are restored on exit.

    Yields:
        int: the number of workers.
    """
    n = effective_threads(hint, nrows)
    old = numba.get_num_threads()
    _log.debug('running %d rows on %d threads', nrows, n)
    numba.set_num_threads(n)
    try:
        with numba.parallel_chunksize(CHUNK_SIZE):
            yield n
    finally:
        numba.set_num_threads(old)


def arena_workers():
    """
    Get the number of rows a per-worker scratch arena needs so that every
    worker id reported by :py:func:`numba.get_thread_id` owns a row.  Inside
    :py:func:`parallel_region` this is the number of workers it yields.
    """
    return numba.get_num_threads()
