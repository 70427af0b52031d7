"""
Cherry Startup Profiler
=======================

Times the phases of compiler startup (terminal table, grammar, FIRST sets)
and records the process memory after each one.
"""

import time
import threading
import sys
import json
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from contextlib import contextmanager
from pathlib import Path

import psutil


@dataclass
class StartupPhase:
    """Represents a specific startup phase measurement"""
    name: str
    start_time: float
    end_time: Optional[float] = None
    duration_ms: float = 0.0
    memory_usage_bytes: int = 0
    description: str = ""


@dataclass
class StartupProfile:
    """Complete startup performance profile"""
    total_startup_time_ms: float
    phases: List[StartupPhase] = field(default_factory=list)
    bottlenecks: List[str] = field(default_factory=list)
    memory_peak_mb: float = 0.0


class StartupProfiler:
    """
    Startup profiler for the Cherry front end.

    Phases are recorded in the order they finish. The profiler is safe to
    share between threads, though startup itself runs on one.
    """

    def __init__(self, bottleneck_threshold_ms: float = 10.0):
        self.bottleneck_threshold_ms = bottleneck_threshold_ms
        self.phases: List[StartupPhase] = []
        self.lock = threading.Lock()
        self._process = psutil.Process()

    @contextmanager
    def profile_phase(self, phase_name: str, description: str = ""):
        """Context manager for profiling a startup phase"""
        phase = StartupPhase(
            name=phase_name,
            start_time=time.perf_counter(),
            description=description
        )

        try:
            yield phase
        finally:
            phase.end_time = time.perf_counter()
            phase.duration_ms = (phase.end_time - phase.start_time) * 1000
            phase.memory_usage_bytes = self._process.memory_info().rss

            with self.lock:
                self.phases.append(phase)

    def get_total_startup_time_ms(self) -> float:
        """Get total measured startup time"""
        if not self.phases:
            return 0.0

        earliest_start = min(phase.start_time for phase in self.phases)
        latest_end = max(phase.end_time for phase in self.phases if phase.end_time)

        return (latest_end - earliest_start) * 1000

    def identify_bottlenecks(self, threshold_ms: Optional[float] = None) -> List[str]:
        """Identify phases taking longer than threshold, slowest first"""
        if threshold_ms is None:
            threshold_ms = self.bottleneck_threshold_ms

        slow = [phase for phase in self.phases if phase.duration_ms > threshold_ms]
        slow.sort(key=lambda phase: phase.duration_ms, reverse=True)
        return [f"{phase.name}: {phase.duration_ms:.1f}ms" for phase in slow]

    def create_profile_report(self) -> StartupProfile:
        peak_memory_mb = max((p.memory_usage_bytes for p in self.phases), default=0) / (1024 * 1024)

        return StartupProfile(
            total_startup_time_ms=self.get_total_startup_time_ms(),
            phases=self.phases.copy(),
            bottlenecks=self.identify_bottlenecks(),
            memory_peak_mb=peak_memory_mb,
        )

    def to_dict(self) -> Dict[str, Any]:
        profile = self.create_profile_report()
        return {
            'total_startup_time_ms': profile.total_startup_time_ms,
            'bottlenecks': profile.bottlenecks,
            'memory_peak_mb': profile.memory_peak_mb,
            'phases': [
                {
                    'name': phase.name,
                    'duration_ms': phase.duration_ms,
                    'memory_usage_mb': phase.memory_usage_bytes / (1024 * 1024),
                    'description': phase.description
                }
                for phase in profile.phases
            ],
            'system_info': {
                'python_version': "{}.{}.{}".format(*sys.version_info[:3]),
                'platform': sys.platform,
            },
            'timestamp': time.strftime('%Y-%m-%d %H:%M:%S')
        }

    def export_profile(self, filename: str = "startup_profile.json") -> Path:
        """Export startup profile to a JSON file"""
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        return path

    def print_report(self):
        profile = self.create_profile_report()
        print(f"Startup: {profile.total_startup_time_ms:.1f}ms, peak memory {profile.memory_peak_mb:.1f}MB")
        for phase in profile.phases:
            print(f"   {phase.name:<24} {phase.duration_ms:8.2f}ms")
        for bottleneck in profile.bottlenecks:
            print(f"   slow phase: {bottleneck}")
