import typing as tp
from .data_structures.views import SequenceView

T = tp.TypeVar('T')
class Timer:
    '''
        Records laps measured with `time_func`.

        start() while running closes the current lap and opens another,
        so a loop can call start() once per iteration and stop() at the end.
    '''
    _time_func : tp.Callable[[], T]
    _laps : tp.List[T]
    _started : tp.Optional[T]

    def __init__(self, time_func : tp.Callable[[], T]):
        self._time_func = time_func
        self._laps = []
        self._started = None

    def reset(self) -> None:
        self._laps = []
        self._started = None

    def start(self) -> None:
        t = self._time_func()
        if self.running:
            self._laps.append(t - self._started)
        self._started = t

    def stop(self) -> None:
        if self.running:
            self._laps.append(self._time_func() - self._started)
            self._started = None

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._started is not None

    @property
    def times(self) -> tp.Sequence[T]:
        return SequenceView(self._laps)

    @property
    def total(self) -> T:
        return sum(self.times)

    @property
    def best(self) -> T:
        return min(self.times)


class _NullTimer(Timer):
    def __init__(self): pass
    def reset(self): pass
    def start(self): pass
    def stop(self): pass

    _laps = ()
    _started = None

_NullTimer.__name__ = 'NullTimer'
_inst = None
def NullTimer() -> Timer:
    global _inst
    if _inst is None:
        _inst = _NullTimer()
    return _inst
