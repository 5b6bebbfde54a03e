import math
import time


class Clock:
  def __init__(self):
    self.reset()

  def reset(self):
    self._ini = time.perf_counter_ns()

  def elapsed_ms(self):
    return (time.perf_counter_ns() - self._ini) / 1e6

  def lap_ms(self):
    """Milliseconds since the last lap (or reset), restarting the clock."""
    now = time.perf_counter_ns()
    elapsed = (now - self._ini) / 1e6
    self._ini = now
    return elapsed


class Statistics:
  """
  Timing samples for one queue operation.

  Each sample is the wall time of a batch of `operations` calls. Mean and
  variance are kept with Welford's running update.
  """

  def __init__(self, name=''):
    self.name = name
    self.n = 0
    self._mean = 0.0
    self._m2 = 0.0
    self.min = float('inf')
    self.max = float('-inf')
    self.total_ms = 0.0
    self.operations = 0

  def add(self, elapsed_ms, operations=1):
    self.n += 1
    delta = elapsed_ms - self._mean
    self._mean += delta / self.n
    self._m2 += delta * (elapsed_ms - self._mean)
    self.min = min(self.min, elapsed_ms)
    self.max = max(self.max, elapsed_ms)
    self.total_ms += elapsed_ms
    self.operations += operations

  def mean(self):
    return self._mean

  def variance(self):
    return self._m2 / self.n

  def std(self):
    return math.sqrt(self.variance())

  def per_operation_us(self):
    return self.total_ms * 1000 / self.operations

  def __str__(self):
    if self.n == 0:
      return f'{self.name:16s} -'
    return '{:16s} mean: {:.3f} ms\tstd: {:.3f}\tmin: {:.3f}\tmax: {:.3f}\tcalls: {:9d}\t{:.3f} us/call'.format(
      self.name,
      self.mean(),
      self.std(),
      self.min,
      self.max,
      self.operations,
      self.per_operation_us() if self.operations else 0.0,
    )
