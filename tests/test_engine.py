"""Tests for the question answering and scoring engine."""

import math
import threading

import pytest

from citytwin.engine.answers import (
    SUMMARY_ANSWER,
    UNKNOWN_ANSWER,
    answer,
    answer_scores,
    respond,
)
from citytwin.engine.cities import CITY_BASELINES, CityBaseline, find_city
from citytwin.engine.numeric import format_number, numeric_values, round_half_up, stats, to_number
from citytwin.engine.personas import PERSONAS, advise
from citytwin.engine.scoring import (
    HealthScoreTracker,
    HealthState,
    attach_scores,
    compute_city_scores,
    compute_health_score,
    grade_for_score,
    recommend_city,
)
from citytwin.engine.simulation import calm_traffic, plant_trees, reset_simulation
from citytwin.engine.topics import Topic, classify
from citytwin.schemas.context import CityScoreItem, Persona, QueryContext
from citytwin.schemas.layers import Feature, FeatureCollection, LayerSet
from citytwin.services.sample_data import load_layer, load_layers


def collection(*properties: dict) -> FeatureCollection:
    """Feature collection with one point feature per properties dict."""
    return FeatureCollection(features=[
        Feature(properties=p, geometry={"type": "Point", "coordinates": [-9.76, 31.5]})
        for p in properties
    ])


class TestNumeric:
    """Tests for numeric coercion and stats."""

    @pytest.mark.parametrize("value,expected", [
        (5, 5.0),
        (2.5, 2.5),
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("-3", -3.0),
    ])
    def test_to_number_accepts_numbers_and_numeric_strings(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "   ", "abc", "12abc", True, False, float("nan"), float("inf"), "inf", "NaN", [1], {"a": 1}, "1_000",
        10 ** 400, -(10 ** 400), "1" + "0" * 400,
    ])
    def test_to_number_drops_everything_else(self, value):
        assert to_number(value) is None

    def test_numeric_values_preserves_order(self):
        assert numeric_values([3, "x", "1", None, 2.5]) == [3.0, 1.0, 2.5]

    def test_stats_empty(self):
        assert stats([]) is None

    def test_stats_singleton(self):
        result = stats([42])
        assert (result.min, result.max, result.avg) == (42, 42, 42)

    def test_stats_rounds_average(self):
        result = stats([1, 2, 2])
        assert result.min == 1
        assert result.max == 2
        assert result.avg == 1.67

    @pytest.mark.parametrize("values", [
        [1.005],
        [0.1, 0.1, 0.1],
        [-5, 3.333, 12.1],
        [1e308, 1e308],
        [70, 85, 85],
    ])
    def test_average_within_extremes(self, values):
        result = stats(values)
        assert result.min <= result.avg <= result.max

    def test_round_half_up(self):
        assert round_half_up(2.675, 2) == 2.68
        assert round_half_up(77.5) == 78
        assert round_half_up(0.125, 2) == 0.13

    def test_format_number(self):
        assert format_number(80.0) == "80"
        assert format_number(80.5) == "80.5"
        assert format_number(0.35) == "0.35"

    @pytest.mark.parametrize("value,expected", [
        (-12.25, "-12.25"),
        (-0.0, "0"),
        (1e-6, "0.000001"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (1e16, "10000000000000000"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.25e22, "1.25e+22"),
        (10 ** 400, "Infinity"),
    ])
    def test_format_number_exponent_range(self, value, expected):
        assert format_number(value) == expected


class TestClassifier:
    """Tests for keyword topic classification."""

    @pytest.mark.parametrize("question,topic", [
        ("Which area has the highest noise levels?", Topic.NOISE),
        ("average traffic speed", Topic.TRAFFIC),
        ("What SPEED do cars drive?", Topic.TRAFFIC),
        ("What is the tallest building?", Topic.BUILDINGS),
        ("Building heights please", Topic.BUILDINGS),
        ("Where is heat worst?", Topic.HEAT),
        ("show vulnerability", Topic.HEAT),
        ("How many sensors are deployed?", Topic.SENSORS),
        ("Give me a summary", Topic.SUMMARY),
        ("overview", Topic.SUMMARY),
        ("Which city do you recommend?", Topic.SCORES),
        ("hello there", Topic.UNKNOWN),
        ("", Topic.UNKNOWN),
    ])
    def test_classify(self, question, topic):
        assert classify(question) is topic

    def test_first_listed_keyword_wins(self):
        assert classify("noise and traffic levels") is Topic.NOISE
        assert classify("traffic near the tallest building") is Topic.TRAFFIC
        assert classify("sensor summary") is Topic.SENSORS

    def test_layer_topics_outrank_scores(self):
        assert classify("noise score") is Topic.NOISE
        assert classify("summary of scores") is Topic.SUMMARY


class TestAnswers:
    """Tests for per-topic answers."""

    @pytest.fixture
    def noise_layers(self):
        return LayerSet(noise=collection(
            {"id": "A", "level": 70},
            {"id": "B", "level": 85},
            {"id": "C", "level": 85},
        ))

    def test_noise_highest_includes_ties(self, noise_layers):
        assert answer(Topic.NOISE, noise_layers) == (
            "Noise — min: 70, max: 85, avg: 80. Highest in: B, C."
        )

    def test_end_to_end_noise_question(self, noise_layers):
        context = QueryContext(persona="health", layers=noise_layers)
        assert respond("Which area has the highest noise levels?", context) == (
            "Noise — min: 70, max: 85, avg: 80. Highest in: B, C.\n\n"
            + PERSONAS[Persona.HEALTH].advice
        )

    def test_noise_missing_id_and_bad_levels(self):
        layers = LayerSet(noise=collection({"level": "60"}, {"id": "x", "level": "loud"}, {"id": "y"}))
        assert answer(Topic.NOISE, layers) == "Noise — min: 60, max: 60, avg: 60. Highest in: unknown."

    @pytest.mark.parametrize("topic,sentence,layer", [
        (Topic.NOISE, "No noise data found.", "noise"),
        (Topic.TRAFFIC, "No traffic data found.", "traffic"),
        (Topic.BUILDINGS, "No buildings data found.", "buildings"),
        (Topic.HEAT, "No heat-vulnerability data found.", "heat"),
        (Topic.SENSORS, "No sensor data found.", "sensors"),
    ])
    def test_absent_or_empty_layers(self, topic, sentence, layer):
        assert answer(topic, LayerSet()) == sentence
        assert answer(topic, LayerSet(**{layer: FeatureCollection()})) == sentence

    def test_non_numeric_values_read_as_no_data(self):
        layers = LayerSet(traffic=collection({"road": "A", "speed_kmh": "fast"}, {"road": "B"}))
        assert answer(Topic.TRAFFIC, layers) == "No traffic data found."

    def test_empty_traffic_end_to_end(self):
        context = QueryContext(layers=LayerSet(traffic=FeatureCollection()))
        reply = respond("average traffic speed", context)
        assert reply == "No traffic data found.\n\n" + advise(Persona.CITIZEN)

    def test_traffic_reports_slowest_roads(self):
        layers = LayerSet(traffic=collection(
            {"road": "A", "speed_kmh": 30},
            {"road": "B", "speed_kmh": "12"},
            {"road": "C", "speed_kmh": 12},
            {"speed_kmh": "n/a"},
        ))
        assert answer(Topic.TRAFFIC, layers) == (
            "Traffic — min: 12 km/h, max: 30 km/h, avg: 18 km/h. Slowest: B, C."
        )

    def test_buildings_label_fallbacks(self):
        layers = LayerSet(buildings=collection(
            {"name": "Tower", "id": "b1", "height_m": 40},
            {"id": "b2", "height_m": "40"},
            {"height_m": 10},
        ))
        assert answer(Topic.BUILDINGS, layers) == (
            "Buildings — min: 10 m, max: 40 m, avg: 30 m. Tallest: Tower (40 m), b2 (40 m)."
        )

    def test_heat_highest_zones(self):
        layers = LayerSet(heat=collection(
            {"zone": "Z1", "vulnerability": 0.5},
            {"zone": "Z2", "vulnerability": 0.9},
            {"vulnerability": 0.9},
        ))
        assert answer(Topic.HEAT, layers) == (
            "Heat vulnerability — min: 0.5, max: 0.9, avg: 0.77. Highest: Z2 (0.9), unknown (0.9)."
        )

    def test_non_text_labels_render_like_numbers(self):
        layers = LayerSet(heat=collection(
            {"zone": 3.0, "vulnerability": 0.9},
            {"zone": True, "vulnerability": 0.9},
            {"zone": 7, "vulnerability": 0.2},
        ))
        assert answer(Topic.HEAT, layers) == (
            "Heat vulnerability — min: 0.2, max: 0.9, avg: 0.67. Highest: 3 (0.9), true (0.9)."
        )

    def test_overflowing_value_dropped_from_sample(self):
        layers = LayerSet(noise=collection({"id": "A", "level": 10 ** 400}, {"id": "B", "level": 64}))
        assert answer(Topic.NOISE, layers) == "Noise — min: 64, max: 64, avg: 64. Highest in: B."

    def test_sensor_breakdown_in_first_seen_order(self):
        layers = LayerSet(sensors=collection(
            {"type": "noise"}, {"type": "air"}, {"type": "noise"}, {},
        ))
        assert answer(Topic.SENSORS, layers) == "4 sensors. Types — noise: 2, air: 1, unknown: 1."

    def test_summary_ignores_layers(self, noise_layers):
        assert answer(Topic.SUMMARY, noise_layers) == SUMMARY_ANSWER
        assert answer(Topic.SUMMARY, LayerSet()) == SUMMARY_ANSWER

    def test_unknown_topic_still_gets_advice(self):
        context = QueryContext(persona="investor")
        assert respond("what's for lunch?", context) == (
            UNKNOWN_ANSWER + "\n\n" + PERSONAS[Persona.INVESTOR].advice
        )

    def test_answers_are_repeatable(self, noise_layers):
        context = QueryContext(layers=noise_layers)
        first = respond("noise please", context)
        second = respond("noise please", context)
        assert first == second

    def test_null_properties(self):
        feature = Feature.model_validate({"type": "Feature", "properties": None, "geometry": None})
        layers = LayerSet(noise=FeatureCollection(features=[feature]))
        assert answer(Topic.NOISE, layers) == "No noise data found."

    def test_scores_topic_needs_context(self):
        with pytest.raises(ValueError):
            answer(Topic.SCORES, LayerSet())

    def test_answer_scores(self):
        context = QueryContext(
            health_score=72,
            city_scores=[
                CityScoreItem(name="Essaouira", score=80, recommended=True),
                CityScoreItem(name="Madrid", score=39),
            ],
        )
        assert answer_scores(context) == (
            "Health & air score: 72 (Yellow (OK)). "
            "City scores — Essaouira: 80 (recommended), Madrid: 39."
        )
        assert answer_scores(QueryContext()) == "No score data found."

    def test_sample_data_answers(self):
        context = QueryContext(layers=load_layers())
        assert "Highest in: port." in respond("Where is it loudest? noise", context)
        assert "Tallest: Beach Hotel (24 m)." in respond("tallest building", context)
        assert "Slowest: Rue de la Skala." in respond("traffic", context)
        assert respond("sensors", context).startswith("7 sensors. Types — noise: 3, air: 2")


class TestPersonas:
    """Tests for persona resolution and advice."""

    def test_unset_and_unknown_personas_are_citizen(self):
        citizen = PERSONAS[Persona.CITIZEN].advice
        assert advise(None) == citizen
        assert advise("pirate") == citizen
        assert advise("citizen") == citizen

    def test_advice_per_persona(self):
        assert "lower noise" in advise(Persona.HEALTH)
        assert "calmer traffic" in advise("investor")

    def test_resolve_only_accepts_exact_tags(self):
        assert Persona.resolve("health") is Persona.HEALTH
        assert Persona.resolve("HEALTH") is Persona.CITIZEN
        assert Persona.resolve(3) is Persona.CITIZEN

    def test_context_resolves_persona_once(self):
        assert QueryContext(persona="investor").persona is Persona.INVESTOR
        assert QueryContext(persona=None).persona is Persona.CITIZEN
        assert QueryContext.model_validate({"persona": 42}).persona is Persona.CITIZEN


class TestHealthScore:
    """Tests for the health & air score."""

    def test_defaults_when_layers_missing(self):
        assert compute_health_score(LayerSet()) == 50

    def test_weighted_blend(self):
        layers = LayerSet(
            noise=collection({"level": 70}, {"level": 85}, {"level": 85}),
            heat=collection({"score": 40}),
        )
        # risk = 0.6 * 80 + 0.4 * 40 = 64
        assert compute_health_score(layers) == 36

    def test_first_numeric_key_wins(self):
        layers = LayerSet(
            noise=collection({"noise": "60"}, {"value": 40}, {"level": None, "value": 80}, {"foo": 1}),
            heat=collection({"score": 10, "level": 90}),
        )
        # noise 60, heat 10 -> risk 40
        assert compute_health_score(layers) == 60

    def test_unparseable_key_falls_through(self):
        layers = LayerSet(noise=collection({"level": "loud", "value": 80}, {"level": 10 ** 400}))
        # noise 80, heat default 50 -> risk 68
        assert compute_health_score(layers) == 32

    @pytest.mark.parametrize("noise_level,heat_score,expected", [
        (500, -300, 40),
        (-1000, -1000, 100),
        (1e6, 1e6, 0),
    ])
    def test_averages_clamped(self, noise_level, heat_score, expected):
        layers = LayerSet(
            noise=collection({"level": noise_level}),
            heat=collection({"score": heat_score}),
        )
        score = compute_health_score(layers)
        assert isinstance(score, int)
        assert 0 <= score <= 100
        assert score == expected

    def test_sample_layers(self):
        # noise avg 62.83, heat avg 54 -> risk 59.3
        assert compute_health_score(load_layers()) == 41

    @pytest.mark.parametrize("score,label", [
        (100, "Green (Healthy)"),
        (80, "Green (Healthy)"),
        (79, "Yellow (OK)"),
        (60, "Yellow (OK)"),
        (59, "Orange (Caution)"),
        (40, "Orange (Caution)"),
        (39, "Red (Unhealthy)"),
        (0, "Red (Unhealthy)"),
        (None, "—"),
    ])
    def test_grades(self, score, label):
        assert grade_for_score(score) == label


class TestCityScores:
    """Tests for city composite scores and the recommendation rule."""

    def _scores(self, items):
        return {item.name: item.score for item in items}

    def test_citizen_scores(self):
        items = compute_city_scores(Persona.CITIZEN)
        assert self._scores(items) == {"Essaouira": 80, "Casablanca": 43, "Madrid": 39, "New York": 35}
        assert [item.name for item in items if item.recommended] == ["Essaouira"]

    def test_every_persona_recommends_exactly_one(self):
        for persona in Persona:
            items = compute_city_scores(persona)
            assert len(items) == len(CITY_BASELINES)
            assert sum(item.recommended for item in items) == 1
            assert all(0 <= item.score <= 100 for item in items)

    def test_unset_persona_weighs_like_citizen(self):
        assert compute_city_scores(None) == compute_city_scores(Persona.CITIZEN)

    def test_highest_score_wins(self):
        items = [CityScoreItem(name="Madrid", score=60), CityScoreItem(name="Casablanca", score=75)]
        result = recommend_city(items, Persona.HEALTH)
        assert [item.recommended for item in result] == [False, True]

    def test_ties_go_to_earlier_city(self):
        items = [CityScoreItem(name="A", score=70), CityScoreItem(name="B", score=70)]
        result = recommend_city(items, Persona.INVESTOR)
        assert [item.recommended for item in result] == [True, False]

    def test_essaouira_override_for_citizens(self):
        items = [CityScoreItem(name="Madrid", score=85), CityScoreItem(name="Essaouira", score=80)]
        result = recommend_city(items, Persona.CITIZEN)
        assert {item.name: item.recommended for item in result} == {"Madrid": False, "Essaouira": True}

    def test_override_needs_threshold(self):
        items = [CityScoreItem(name="Madrid", score=85), CityScoreItem(name="Essaouira", score=79)]
        result = recommend_city(items, Persona.CITIZEN)
        assert {item.name: item.recommended for item in result} == {"Madrid": True, "Essaouira": False}

    def test_override_is_citizen_only(self):
        items = [CityScoreItem(name="Madrid", score=85), CityScoreItem(name="Essaouira", score=80)]
        result = recommend_city(items, Persona.HEALTH)
        assert {item.name: item.recommended for item in result} == {"Madrid": True, "Essaouira": False}

    def test_override_with_computed_scores(self):
        baselines = {
            "essaouira": CityBaseline(key="essaouira", name="Essaouira", noise=20, heat=20, traffic=0,
                                      latitude=31.5, longitude=-9.76),
            "madrid": CityBaseline(key="madrid", name="Madrid", noise=15, heat=15, traffic=0,
                                   latitude=40.4, longitude=-3.7),
        }
        citizen = compute_city_scores(Persona.CITIZEN, baselines)
        assert self._scores(citizen) == {"Essaouira": 80, "Madrid": 85}
        assert [item.name for item in citizen if item.recommended] == ["Essaouira"]

        health = compute_city_scores(Persona.HEALTH, baselines)
        assert [item.name for item in health if item.recommended] == ["Madrid"]

    def test_recommend_empty(self):
        assert recommend_city([], Persona.CITIZEN) == []

    def test_find_city(self):
        assert find_city("NYC").name == "New York"
        assert find_city("new york").key == "nyc"
        assert find_city("Atlantis") is None


class TestBaseline:
    """Tests for health score baseline retention."""

    def test_first_score_seeds_baseline(self):
        state = HealthState().advance(60)
        assert (state.current, state.baseline, state.delta) == (60, 60, 0)

        state = state.advance(70)
        assert (state.current, state.baseline, state.delta) == (70, 60, 10)

    def test_reset_reseeds(self):
        state = HealthState().advance(60).advance(70).reset()
        assert state.baseline is None
        assert state.delta is None
        assert state.advance(55).baseline == 55

    def test_tracker(self):
        tracker = HealthScoreTracker()
        tracker.update(41)
        state = tracker.update(45)
        assert (state.baseline, state.delta) == (41, 4)
        assert tracker.reset() == HealthState()
        assert tracker.update(50).baseline == 50

    def test_tracker_concurrent_updates(self):
        tracker = HealthScoreTracker()
        scores = list(range(40, 60))
        threads = [threading.Thread(target=tracker.update, args=(s,)) for s in scores]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        state = tracker.state
        assert state.baseline in scores
        assert state.current in scores

    def test_attach_scores_fills_only_missing(self):
        context = attach_scores(QueryContext())
        assert context.health_score == 50
        assert len(context.city_scores) == len(CITY_BASELINES)

        kept = attach_scores(QueryContext(health_score=12, city_scores=[]))
        assert kept.health_score == 12
        assert kept.city_scores == []


class TestSimulation:
    """Tests for what-if simulations."""

    @pytest.fixture
    def layers(self):
        return LayerSet(
            noise=collection({"id": "a", "level": 100}, {"id": "b", "level": "loud"}),
            traffic=collection({"road": "fast", "speed_kmh": 60}, {"road": "slow", "speed_kmh": 10}),
            buildings=collection({"id": "b1", "height_m": 12}),
        )

    def test_plant_trees_lowers_noise(self, layers):
        result = plant_trees(layers, 1.0)
        assert result.noise.features[0].properties["level"] == pytest.approx(70)
        assert result.noise.features[1].properties["level"] == "loud"

    def test_simulation_does_not_mutate_input(self, layers):
        plant_trees(layers, 1.0)
        calm_traffic(layers, 1.0)
        assert layers.noise.features[0].properties["level"] == 100
        assert layers.traffic.features[0].properties["speed_kmh"] == 60

    def test_zero_intensity_keeps_levels(self, layers):
        result = plant_trees(layers, 0.0)
        assert result.noise.features[0].properties["level"] == pytest.approx(100)

    def test_calm_traffic_pulls_toward_30(self, layers):
        result = calm_traffic(layers, 1.0)
        speeds = [f.properties["speed_kmh"] for f in result.traffic.features]
        assert speeds == [pytest.approx(54), pytest.approx(14)]

    def test_calm_traffic_floor(self):
        layers = LayerSet(traffic=collection({"road": "crawl", "speed_kmh": 1}))
        result = calm_traffic(layers, 0.0)
        assert result.traffic.features[0].properties["speed_kmh"] == 5

    def test_absent_layer_stays_absent(self):
        assert plant_trees(LayerSet(), 0.5).noise is None
        assert calm_traffic(LayerSet(), 0.5).traffic is None

    def test_planting_trees_raises_health_score(self):
        layers = load_layers()
        assert compute_health_score(plant_trees(layers, 1.0)) > compute_health_score(layers)

    def test_reset_restores_simulated_layers(self, layers):
        pristine = load_layers()
        result = reset_simulation(plant_trees(layers, 1.0), pristine)
        assert result.noise == pristine.noise
        assert result.traffic == pristine.traffic
        assert result.buildings == layers.buildings


class TestSampleData:
    """Tests for the bundled layers."""

    def test_all_layers_load(self):
        layers = load_layers()
        for name in ("noise", "buildings", "sensors", "heat", "traffic"):
            assert len(layers.features(name)) > 0

    def test_unknown_layer(self):
        with pytest.raises(ValueError):
            load_layer("parks")

    def test_layer_set_ignores_extra_layers(self):
        layers = LayerSet.model_validate({"noise": None, "parks": {"type": "FeatureCollection", "features": []}})
        assert not hasattr(layers, "parks")
        with pytest.raises(ValueError):
            layers.features("parks")

    def test_coordinates_are_finite(self):
        for feature in load_layer("sensors").features:
            lon, lat = feature.geometry.coordinates
            assert math.isfinite(lon) and math.isfinite(lat)
