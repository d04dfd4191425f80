import unittest

from core.domain.models import GameRequirement, HardwareProfile
from core.domain.presets import Quality, Resolution
from core.services.compatibility import (
    CompatibilityScorer,
    compatibility_label,
    expected_fps,
    is_cpu_compatible,
    is_gpu_compatible,
    parse_ram_gb,
)


def _game(**overrides) -> GameRequirement:
    data = {
        "name": "Test Game",
        "minRam": 8,
        "recommendedRam": 16,
        "minCpu": "Intel i5-6600",
        "recommendedCpu": "Intel i5-10400",
        "minGpu": "GTX 1050",
        "recommendedGpu": "RTX 2060",
        "fps1080pLow": 90,
        "fps1080pMedium": 60,
        "fps1080pHigh": 45,
        "fps1440pLow": 70,
        "fps1440pMedium": 50,
        "fps1440pHigh": 38,
        "fps4kLow": 40,
        "fps4kMedium": 30,
        "fps4kHigh": 22,
    }
    data.update(overrides)
    return GameRequirement.model_validate(data)


STRONG_PC = HardwareProfile(cpu="Intel i7-12700", gpu="RTX 3070", ram="16GB")


class TestGpuCompatibility(unittest.TestCase):
    def test_rtx_always_beats_gtx_requirement(self):
        self.assertTrue(is_gpu_compatible("RTX 2060", "GTX 1080 Ti"))
        self.assertTrue(is_gpu_compatible("rtx 2050", "GTX 1660"))

    def test_gtx_never_meets_rtx_requirement(self):
        self.assertFalse(is_gpu_compatible("GTX 1080 Ti", "RTX 2060"))
        self.assertFalse(is_gpu_compatible("GTX 9999", "RTX 2060"))

    def test_same_brand_compares_numbers(self):
        self.assertTrue(is_gpu_compatible("RTX 3070", "RTX 2060"))
        self.assertFalse(is_gpu_compatible("RTX 2060", "RTX 3070"))
        self.assertTrue(is_gpu_compatible("RX 6800", "RX 580"))
        self.assertFalse(is_gpu_compatible("RX 570", "RX 6600"))

    def test_cross_vendor_compares_numbers(self):
        self.assertTrue(is_gpu_compatible("RX 6600", "GTX 1060"))
        self.assertFalse(is_gpu_compatible("GTX 1060", "RX 6600"))

    def test_indeterminate_is_compatible(self):
        self.assertTrue(is_gpu_compatible("Intel Arc A770", "RTX 3060"))
        self.assertTrue(is_gpu_compatible("RTX 3060", "any DX12 card"))
        self.assertTrue(is_gpu_compatible("", ""))


class TestCpuCompatibility(unittest.TestCase):
    def test_intel_generations(self):
        self.assertTrue(is_cpu_compatible("Intel Core i5-12400F", "Intel i7-10700"))
        self.assertFalse(is_cpu_compatible("Intel i7-8700", "Intel i5-10400"))

    def test_ryzen_series(self):
        self.assertTrue(is_cpu_compatible("AMD Ryzen 7 5800X", "Ryzen 5 3600X"))
        self.assertFalse(is_cpu_compatible("Ryzen 5 5600", "Ryzen 7 3700X"))

    def test_mixed_or_unknown_is_compatible(self):
        self.assertTrue(is_cpu_compatible("Ryzen 3 1200", "Intel i9-13900K"))
        self.assertTrue(is_cpu_compatible("Apple M2", "Intel i5-10400"))
        self.assertTrue(is_cpu_compatible("", ""))


class TestHelpers(unittest.TestCase):
    def test_parse_ram(self):
        self.assertEqual(parse_ram_gb("16GB"), 16)
        self.assertEqual(parse_ram_gb("32 GB"), 32)
        self.assertEqual(parse_ram_gb(None), 0)
        self.assertEqual(parse_ram_gb("lots"), 0)
        self.assertEqual(parse_ram_gb("1" * 5000), 0)

    def test_expected_fps(self):
        game = _game()
        self.assertEqual(expected_fps(game, Resolution.P1440, Quality.MEDIUM), 50)
        self.assertEqual(expected_fps(game, Resolution.UHD_4K, Quality.ULTRA), 22)
        self.assertEqual(expected_fps(_game(fps4kHigh=0), Resolution.UHD_4K, Quality.HIGH), 60)

    def test_labels(self):
        self.assertEqual(compatibility_label(100), "Excellent")
        self.assertEqual(compatibility_label(90), "Excellent")
        self.assertEqual(compatibility_label(85), "Good")
        self.assertEqual(compatibility_label(70), "Good")
        self.assertEqual(compatibility_label(55), "Fair")
        self.assertEqual(compatibility_label(10), "Poor")


class TestCompatibilityScorer(unittest.TestCase):
    def setUp(self) -> None:
        self.scorer = CompatibilityScorer()

    def test_all_checks_pass(self):
        result = self.scorer.score(STRONG_PC, [_game()], Resolution.P1080, Quality.MEDIUM, 60)
        self.assertTrue(result.is_compatible)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.issues, [])
        self.assertEqual(result.recommendations, [])
        self.assertEqual(result.label, "Excellent")

    def test_single_fps_issue_fails_verdict_despite_score(self):
        result = self.scorer.score(STRONG_PC, [_game()], Resolution.P1080, Quality.MEDIUM, 144)
        self.assertEqual(result.score, 85)
        self.assertEqual(result.issues, ["Test Game: Expected 60 FPS < 144 FPS target"])
        self.assertFalse(result.is_compatible)
        self.assertEqual(result.recommendations, [])

    def test_low_quality_uses_minimum_specs(self):
        weak = HardwareProfile(cpu="Intel i5-7500", gpu="GTX 1050 Ti", ram="8GB")
        low = self.scorer.score(weak, [_game()], Resolution.P1080, Quality.LOW, 60)
        self.assertTrue(low.is_compatible)

        medium = self.scorer.score(weak, [_game()], Resolution.P1080, Quality.MEDIUM, 60)
        self.assertFalse(medium.is_compatible)
        self.assertEqual(medium.score, 100 - 30 - 20 - 25)
        self.assertEqual(
            medium.issues,
            [
                "Test Game: Insufficient RAM (8GB < 16GB required)",
                "Test Game: CPU may not meet requirements",
                "Test Game: GPU may not meet requirements",
            ],
        )
        self.assertEqual(
            medium.recommendations,
            [
                "Upgrade RAM for better multitasking and gaming",
                "Consider upgrading CPU for better overall performance",
                "Consider upgrading GPU for better gaming performance",
            ],
        )

    def test_every_check_failing(self):
        weak = HardwareProfile(cpu="Intel i3-4130", gpu="GTX 750", ram="4GB")
        result = self.scorer.score(weak, [_game()], Resolution.UHD_4K, Quality.HIGH, 60)
        self.assertEqual(result.score, 10)
        self.assertEqual(len(result.issues), 4)
        self.assertEqual(result.label, "Poor")

    def test_average_across_games(self):
        games = [_game(name="A"), _game(name="B", recommendedGpu="RTX 4090")]
        result = self.scorer.score(STRONG_PC, games, Resolution.P1080, Quality.MEDIUM, 60)
        # A: 100, B: 75 -> 87.5 rounds half up
        self.assertEqual(result.score, 88)
        self.assertFalse(result.is_compatible)
        self.assertEqual(result.issues, ["B: GPU may not meet requirements"])

    def test_recommendations_are_deduplicated(self):
        weak = HardwareProfile(cpu="Intel i7-12700", gpu="RTX 3070", ram="4GB")
        games = [_game(name="A"), _game(name="B")]
        result = self.scorer.score(weak, games, Resolution.P1080, Quality.MEDIUM, 60)
        self.assertEqual(len(result.issues), 2)
        self.assertEqual(result.recommendations, ["Upgrade RAM for better multitasking and gaming"])

    def test_no_games(self):
        result = self.scorer.score(STRONG_PC, [], Resolution.P1080, Quality.MEDIUM, 60)
        self.assertEqual(result.score, 0)
        self.assertFalse(result.is_compatible)
        self.assertEqual(result.issues, [])

    def test_wire_aliases(self):
        result = self.scorer.score(STRONG_PC, [_game()], Resolution.P1080, Quality.MEDIUM, 60)
        dumped = result.model_dump(by_alias=True)
        self.assertIn("isCompatible", dumped)
        self.assertTrue(dumped["isCompatible"])


if __name__ == "__main__":
    unittest.main()
