import pytest

from fit_power.compare import GradeBucket, PowerComparison, compare_power, format_comparison_report
from fit_power.estimator import estimate_power


class TestComparePower:
    def test_no_power_data(self, flat_samples):
        result = compare_power(flat_samples)
        assert not result.has_power_data
        assert result.sample_count == 0
        assert result.grade_buckets == []

    def test_perfect_estimate(self, rider, make_sample):
        samples = [make_sample(i, speed_mps=6.0 + i * 0.2) for i in range(12)]
        estimate_power(samples, rider)
        for s in samples:
            s.power_w = s.estimated_power_w

        result = compare_power(samples)
        assert result.has_power_data
        assert result.sample_count == 12
        assert result.mean_abs_error == pytest.approx(0.0)
        assert result.bias == pytest.approx(0.0)
        assert result.correlation == pytest.approx(1.0)

    def test_bias_sign(self, make_sample):
        samples = [make_sample(i, power_w=200.0, estimated_power_w=220.0) for i in range(5)]
        result = compare_power(samples)
        assert result.bias == pytest.approx(20.0)
        assert result.mean_abs_error == pytest.approx(20.0)
        assert result.avg_measured_power == pytest.approx(200.0)
        assert result.avg_estimated_power == pytest.approx(220.0)

    def test_constant_power_has_no_correlation(self, make_sample):
        samples = [make_sample(i, power_w=200.0, estimated_power_w=150.0 + i) for i in range(5)]
        assert compare_power(samples).correlation is None

    def test_skips_placeholders_and_missing_power(self, make_sample):
        samples = [make_sample(i, power_w=200.0, estimated_power_w=200.0) for i in range(4)]
        samples[1].distance_m = -1.0
        samples[2].power_w = None
        assert compare_power(samples).sample_count == 2

    def test_grade_buckets(self, make_sample):
        samples = [make_sample(i, gradient=0.4, power_w=150.0) for i in range(3)]
        samples += [make_sample(i, gradient=5.2, power_w=300.0) for i in range(3, 5)]
        samples += [make_sample(5, gradient=30.0, power_w=500.0)]
        result = compare_power(samples)
        assert [b.grade_pct for b in result.grade_buckets] == [0, 6, 12]
        assert result.grade_buckets[0].sample_count == 3
        assert result.grade_buckets[1].avg_measured_power == pytest.approx(300.0)

    def test_stationary_samples_not_bucketed(self, make_sample):
        samples = [make_sample(i, speed_mps=0.0, power_w=0.0) for i in range(3)]
        result = compare_power(samples)
        assert result.sample_count == 3
        assert result.grade_buckets == []

    def test_implied_speed_round_trips(self, rider, make_sample):
        samples = [make_sample(i, speed_mps=8.0) for i in range(3)]
        estimate_power(samples, rider)
        for s in samples:
            s.power_w = s.estimated_power_w

        bucket = compare_power(samples, rider).grade_buckets[0]
        assert bucket.avg_implied_speed == pytest.approx(8.0, abs=0.01)

    def test_no_implied_speed_without_rider(self, make_sample):
        samples = [make_sample(i, power_w=200.0) for i in range(3)]
        assert compare_power(samples).grade_buckets[0].implied_speeds == []


class TestGradeBucket:
    def test_empty_averages(self):
        bucket = GradeBucket(grade_pct=0, measured_powers=[], estimated_powers=[],
                             actual_speeds=[], implied_speeds=[])
        assert bucket.avg_measured_power == 0.0
        assert bucket.power_error_pct == 0.0

    def test_power_error_pct(self):
        bucket = GradeBucket(grade_pct=2, measured_powers=[200.0, 200.0], estimated_powers=[220.0, 240.0],
                             actual_speeds=[5.0, 5.0], implied_speeds=[])
        assert bucket.power_error_pct == pytest.approx(15.0)


class TestFormatComparisonReport:
    def test_no_power_data(self):
        result = PowerComparison(
            sample_count=0, has_power_data=False, avg_measured_power=None, avg_estimated_power=None,
            mean_abs_error=None, bias=None, correlation=None, grade_buckets=[],
        )
        report = format_comparison_report(result)
        assert "No power meter data" in report

    def test_report_contents(self, rider, make_sample):
        samples = [make_sample(i, speed_mps=6.0 + (i % 4), power_w=180.0) for i in range(20)]
        estimate_power(samples, rider)
        report = format_comparison_report(compare_power(samples, rider))
        assert "Estimated vs Measured Power" in report
        assert "Mean abs error:" in report
        assert "Correlation:    n/a" in report
        assert "   +0% |" in report
