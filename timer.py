#
# Copyright (C) 2023 The Android Open Source Project
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
from time import time
from datetime import datetime, timedelta

import sys
from typing import Callable, Dict, List, Optional, TextIO, Tuple


class Timer:
    times: Dict[str, float] = {}
    def __init__(self, descr):
        self.descr = descr

    def __enter__(self):
        self.start = time()

    def __exit__(self, t, value, traceback):
        end = time()
        type(self).times[self.descr] = end - self.start

    @classmethod
    def report(cls):
        """Return list of '<duration> <description>' entries."""
        pretty_print = lambda t: str(timedelta(seconds=int(t)))
        result = sorted(cls.times.items(), key=lambda item: item[1], reverse=True)
        return '\n'.join(f'{pretty_print(t)} {d}' for d, t in result)

    @classmethod
    def reset(cls):
        cls.times = {}


class Reporter:
    """Prints section banners and a final table of stage start times."""

    def __init__(self, out: Optional[TextIO] = None,
                 clock: Callable[[], datetime] = datetime.now) -> None:
        self._out = out
        self._clock = clock
        self.marks: List[Tuple[str, datetime]] = []

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def _print(self, text: str = '') -> None:
        print(text, file=self.out, flush=True)

    def mark(self, stage: str) -> None:
        """Records the time stage starts."""
        self.marks.append((stage, self._clock()))

    def banner(self, title: str) -> None:
        stamp = self._clock().strftime('%Y-%m-%d %H:%M:%S')
        self._print('=' * 72)
        self._print(f'{title.upper()} ({stamp})')
        self._print('=' * 72)

    def report(self) -> str:
        lines = ['stage      time']
        lines.extend(f'{stage:<10} {when.strftime("%Y-%m-%d %H:%M:%S")}'
                     for stage, when in self.marks)
        durations = Timer.report()
        if durations:
            lines.append('')
            lines.append('durations:')
            lines.append(durations)
        return '\n'.join(lines)

    def summary(self) -> None:
        self.banner('summary')
        self._print(self.report())
