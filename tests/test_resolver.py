import unittest

from tknotation.models import IconAsset, IconClass, TextFallback, Token
from tknotation.resolver import LEGAL_ATTACK_BUTTONS, is_legal_attack, resolve, resolve_all


class AssetResolverTests(unittest.TestCase):
    def test_fifteen_canonical_button_combinations(self) -> None:
        self.assertEqual(len(LEGAL_ATTACK_BUTTONS), 15)
        for combo in LEGAL_ATTACK_BUTTONS:
            self.assertEqual(
                resolve(combo),
                IconAsset(IconClass.ATTACK, f"attack-buttons/{combo}.png"),
            )

    def test_other_digit_tokens_are_attempted_but_not_legal(self) -> None:
        self.assertEqual(resolve("1+5"), IconAsset(IconClass.ATTACK, "attack-buttons/1+5.png"))
        self.assertFalse(is_legal_attack("1+5"))
        self.assertFalse(is_legal_attack("2+1"))
        self.assertEqual(resolve("d/f+1").icon_class, IconClass.ATTACK)

    def test_hold_direction_uses_lower_case_path(self) -> None:
        self.assertEqual(resolve("D"), IconAsset(IconClass.HOLD, "hold-direction/d.png"))
        self.assertEqual(resolve("DF"), IconAsset(IconClass.HOLD, "hold-direction/df.png"))

    def test_press_direction_uses_token_verbatim(self) -> None:
        self.assertEqual(resolve("f"), IconAsset(IconClass.PRESS, "press-direction/f.png"))
        self.assertEqual(resolve("ub"), IconAsset(IconClass.PRESS, "press-direction/ub.png"))

    def test_misc_symbols(self) -> None:
        for symbol in ("-", "[", "]"):
            self.assertEqual(resolve(symbol), IconAsset(IconClass.MISC, f"misc/{symbol}.png"))

    def test_everything_else_falls_back_to_text(self) -> None:
        for token in ("Df", "d/f", '"Jin"', "~", "WS!", "f+D"):
            self.assertEqual(resolve(token), TextFallback(token), token)

    def test_classification_is_deterministic(self) -> None:
        for token in ("1+2", "D", "f", "-", "Df", "xyz"):
            self.assertEqual(resolve(token), resolve(token))

    def test_resolve_all_preserves_order_and_count(self) -> None:
        tokens = [Token(text, text) for text in ("1", "Df", "D", "[")]
        resolved = resolve_all(tokens)
        self.assertEqual([item.token for item in resolved], tokens)
        self.assertEqual([item.is_icon for item in resolved], [True, False, True, True])
        self.assertTrue(resolved[3].is_narrow)
        self.assertFalse(resolved[0].is_narrow)
        self.assertEqual(resolved[1].fallback_text, "Df")


if __name__ == "__main__":
    unittest.main()
