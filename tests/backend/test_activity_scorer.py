"""Tests for activity suitability scoring."""

import pytest

from wxdash.errors import ComputeDegenerateError
from wxdash.models.weather import Activity, HourlyObservation, Rating, WeatherObservation
from wxdash.schemas.activity import (
    RangeBounds,
    TemperatureBounds,
    ThresholdSet,
    UpperBound,
)
from wxdash.services.activity_scorer import (
    DEFAULT_THRESHOLDS,
    compute_score,
    default_thresholds,
    evaluate_aqi,
    evaluate_humidity,
    evaluate_precipitation,
    evaluate_temperature,
    evaluate_wind,
    find_best_hours,
    rate_activity,
    score_to_rating,
)


def _hour(time, temperature=60, wind_speed=5, precipitation=0, humidity=50):
    return HourlyObservation(
        temperature=temperature, wind_speed=wind_speed,
        precipitation=precipitation, humidity=humidity, time=time,
    )


class TestTemperature:
    BOUNDS = TemperatureBounds(min=40, max=75, optimal=60)

    def test_optimal_is_good(self):
        assert evaluate_temperature(60, self.BOUNDS) == Rating.GOOD

    def test_outside_range_is_poor(self):
        assert evaluate_temperature(39, self.BOUNDS) == Rating.POOR
        assert evaluate_temperature(76, self.BOUNDS) == Rating.POOR

    def test_moderate_deviation_is_fair(self):
        # max deviation 20; 10 away -> closeness 0.5
        assert evaluate_temperature(50, self.BOUNDS) == Rating.FAIR

    def test_edge_of_range_is_poor(self):
        # 40 is 20 away -> closeness 0
        assert evaluate_temperature(40, self.BOUNDS) == Rating.POOR

    def test_missing_threshold_is_fair(self):
        assert evaluate_temperature(120, None) == Rating.FAIR


class TestWindAndPrecipitation:
    def test_wind(self):
        bounds = UpperBound(max=20)
        assert evaluate_wind(9.9, bounds) == Rating.GOOD
        assert evaluate_wind(10, bounds) == Rating.FAIR
        assert evaluate_wind(20, bounds) == Rating.FAIR
        assert evaluate_wind(21, bounds) == Rating.POOR
        assert evaluate_wind(100, None) == Rating.FAIR

    def test_precipitation(self):
        bounds = UpperBound(max=0.1)
        assert evaluate_precipitation(0.02, bounds) == Rating.GOOD
        assert evaluate_precipitation(0.05, bounds) == Rating.FAIR
        assert evaluate_precipitation(0.2, bounds) == Rating.POOR
        assert evaluate_precipitation(5, None) == Rating.FAIR

    def test_zero_max_precipitation(self):
        bounds = UpperBound(max=0)
        assert evaluate_precipitation(0, bounds) == Rating.FAIR
        assert evaluate_precipitation(0.01, bounds) == Rating.POOR


class TestHumidityAndAqi:
    def test_humidity_midpoint_good(self):
        assert evaluate_humidity(50, RangeBounds(min=30, max=70)) == Rating.GOOD

    def test_humidity_near_edge(self):
        bounds = RangeBounds(min=30, max=70)
        assert evaluate_humidity(62, bounds) == Rating.FAIR  # closeness 0.4
        assert evaluate_humidity(68, bounds) == Rating.POOR  # closeness 0.1
        assert evaluate_humidity(71, bounds) == Rating.POOR

    def test_aqi(self):
        bounds = UpperBound(max=100)
        assert evaluate_aqi(50, bounds) == Rating.GOOD
        assert evaluate_aqi(60, bounds) == Rating.FAIR
        assert evaluate_aqi(71, bounds) == Rating.POOR
        assert evaluate_aqi(101, bounds) == Rating.POOR
        assert evaluate_aqi(300, None) == Rating.FAIR


class TestScore:
    def test_rating_cutoffs(self):
        for s in range(0, 101):
            expected = Rating.GOOD if s >= 70 else Rating.FAIR if s >= 40 else Rating.POOR
            assert score_to_rating(s) == expected

    def test_weights_renormalize_over_present_factors(self):
        factors = {
            "temperature": Rating.GOOD,
            "wind": Rating.GOOD,
            "precipitation": Rating.GOOD,
            "humidity": Rating.GOOD,
        }
        assert compute_score(factors) == 100

    def test_weighted_mix(self):
        factors = {
            "temperature": Rating.GOOD,   # 35
            "wind": Rating.FAIR,          # 10
            "precipitation": Rating.GOOD,  # 25
            "humidity": Rating.POOR,      # 0
        }
        # 70 / 0.95
        assert compute_score(factors) == 74

    def test_empty_factors_raise(self):
        with pytest.raises(ComputeDegenerateError):
            compute_score({})


class TestRateActivity:
    def test_pleasant_running_conditions(self):
        obs = WeatherObservation(
            temperature=60, wind_speed=5, precipitation=0, humidity=50, aqi=30,
        )
        rec = rate_activity(Activity.RUNNING, obs)
        assert rec.rating == Rating.GOOD
        assert rec.score >= 70
        assert rec.factors["temperature"] == Rating.GOOD
        assert rec.factors["wind"] == Rating.GOOD

    def test_harsh_cycling_conditions(self):
        obs = WeatherObservation(
            temperature=95, wind_speed=30, precipitation=0.5, humidity=95, aqi=150,
        )
        rec = rate_activity(Activity.CYCLING, obs)
        assert rec.rating == Rating.POOR
        assert rec.score < 40

    def test_aqi_factor_only_when_present(self):
        without = WeatherObservation(temperature=60, wind_speed=5, precipitation=0, humidity=50)
        with_aqi = WeatherObservation(
            temperature=60, wind_speed=5, precipitation=0, humidity=50, aqi=10,
        )
        assert "aqi" not in rate_activity(Activity.RUNNING, without).factors
        assert "aqi" in rate_activity(Activity.RUNNING, with_aqi).factors

    def test_missing_aqi_does_not_depress_score(self):
        obs = WeatherObservation(temperature=60, wind_speed=5, precipitation=0, humidity=50)
        assert rate_activity(Activity.RUNNING, obs).score == 100

    def test_custom_thresholds_replace_defaults(self):
        obs = WeatherObservation(temperature=60, wind_speed=5, precipitation=0, humidity=50)
        custom = ThresholdSet(temperature=TemperatureBounds(min=80, max=100, optimal=90))
        rec = rate_activity(Activity.RUNNING, obs, custom_thresholds=custom)
        assert rec.factors == {
            "temperature": Rating.POOR,
            "wind": Rating.FAIR,
            "precipitation": Rating.FAIR,
            "humidity": Rating.FAIR,
        }

    def test_no_hourly_means_no_best_hours(self):
        obs = WeatherObservation(temperature=60, wind_speed=5, precipitation=0, humidity=50)
        assert rate_activity(Activity.RUNNING, obs).best_hours == ()

    def test_all_factors_missing_raises(self):
        obs = WeatherObservation(temperature=None, wind_speed=None,
                                 precipitation=None, humidity=None)
        with pytest.raises(ComputeDegenerateError):
            rate_activity(Activity.RUNNING, obs)


class TestBestHours:
    def test_score_descending_not_chronological(self):
        hourly = [
            _hour("09:00", temperature=68),                 # temp fair -> 82
            _hour("10:00", temperature=60),                 # all good -> 100
            _hour("11:00", temperature=100),                # poor temp -> 63
            _hour("12:00", temperature=60, wind_speed=10),  # wind fair -> 89
        ]
        assert find_best_hours(hourly, DEFAULT_THRESHOLDS[Activity.RUNNING]) == [
            "10:00", "12:00", "09:00",
        ]

    def test_at_most_three(self):
        hourly = [_hour(f"{h:02d}:00") for h in range(6)]
        result = find_best_hours(hourly, DEFAULT_THRESHOLDS[Activity.RUNNING])
        assert result == ["00:00", "01:00", "02:00"]

    def test_excludes_hours_below_70(self):
        hourly = [_hour("08:00", temperature=100, wind_speed=40)]
        assert find_best_hours(hourly, DEFAULT_THRESHOLDS[Activity.RUNNING]) == []


class TestMetricDefaults:
    def test_converted_bounds(self):
        t = default_thresholds(Activity.RUNNING, "metric")
        assert t.temperature.optimal == pytest.approx(15.56, abs=0.01)
        assert t.wind.max == pytest.approx(6.71, abs=0.01)
        assert t.precipitation.max == pytest.approx(2.54)
        assert t.humidity == DEFAULT_THRESHOLDS[Activity.RUNNING].humidity

    def test_imperial_is_unchanged(self):
        assert default_thresholds(Activity.CYCLING) is DEFAULT_THRESHOLDS[Activity.CYCLING]
