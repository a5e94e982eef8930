"""
Performance benchmarks for flaguser.

Performance targets:
- Code lookup: <50us
- Name prefix resolution (linear scan of the table): <1ms
- Full builder chain with build(): <1ms
"""

import time

from flaguser.models import CountryCode, UserProfileBuilder


def build_sample_profile(i: int):
    """Build a representative profile."""
    return (
        UserProfileBuilder(f"user-{i}")
        .secondary("tenant-a")
        .ip("10.0.0.1")
        .country("United States")
        .custom_string("plan", "gold")
        .custom_number("seats", i)
        .custom_string_list("groups", ["beta", "staff"])
        .build()
    )


class TestPerformanceBenchmarks:
    """Performance benchmark tests."""

    def test_code_lookup(self, benchmark):
        """Code lookup: <50us."""
        result = benchmark(CountryCode.get_by_code, "usa", False)

        assert result is CountryCode.US
        stats = benchmark.stats
        assert stats.stats.mean < 0.00005, f"Mean time {stats.stats.mean * 1e6:.1f}us exceeds 50us"

    def test_name_resolution(self, benchmark):
        """Name prefix resolution: <1ms."""
        def resolve():
            return UserProfileBuilder("u").country("United States").build()

        profile = benchmark(resolve)

        assert profile.country is CountryCode.US
        stats = benchmark.stats
        assert stats.stats.mean < 0.001, f"Mean time {stats.stats.mean * 1000:.3f}ms exceeds 1ms"

    def test_full_builder_chain(self, benchmark):
        """Builder chain with build(): <1ms."""
        profile = benchmark(build_sample_profile, 1)

        assert profile.get_custom("seats") == 1
        stats = benchmark.stats
        assert stats.stats.mean < 0.001, f"Mean time {stats.stats.mean * 1000:.3f}ms exceeds 1ms"


class TestScalability:
    """Throughput without the benchmark fixture."""

    def test_10000_profiles(self):
        """10,000 profiles should build in under 5 seconds."""
        start = time.perf_counter()
        profiles = [build_sample_profile(i) for i in range(10000)]
        elapsed = time.perf_counter() - start

        assert len(profiles) == 10000
        assert elapsed < 5.0
