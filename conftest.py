import logging

from hypothesis import settings, HealthCheck
from pytest import fixture

from spdense import threads

# turn off Numba logging
logging.getLogger('numba').setLevel(logging.INFO)

THREAD_COUNTS = [1, 4]


# set up fixtures
@fixture(scope="module", params=THREAD_COUNTS)
def nthreads(request):
    """
    Fixture for variable thread counts.  This fixture is parameterized, so a test
    function with a parameter ``nthreads`` is called once single-threaded and once
    with several threads (capped to the size of Numba's pool).
    """
    n = min(request.param, threads.max_threads())
    with threads.use_threads(n):
        yield n


# set up profiles
settings.register_profile('default', deadline=5000)
settings.register_profile('large', settings.get_profile('default'),
                          max_examples=5000, deadline=None)
settings.register_profile('fast', max_examples=50)
settings.register_profile('nojit', settings.get_profile('fast'),
                          deadline=None, suppress_health_check=list(HealthCheck))
settings.load_profile('default')
