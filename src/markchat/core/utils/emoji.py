"""Built-in emoji shortcode table"""

EMOJI: dict[str, str] = {
    "smile":       "\U0001F604",
    "grin":        "\U0001F601",
    "joy":         "\U0001F602",
    "laughing":    "\U0001F606",
    "wink":        "\U0001F609",
    "blush":       "\U0001F60A",
    "sunglasses":  "\U0001F60E",
    "thinking":    "\U0001F914",
    "neutral_face": "\U0001F610",
    "cry":         "\U0001F622",
    "sob":         "\U0001F62D",
    "angry":       "\U0001F620",
    "scream":      "\U0001F631",
    "eyes":        "\U0001F440",
    "wave":        "\U0001F44B",
    "clap":        "\U0001F44F",
    "pray":        "\U0001F64F",
    "muscle":      "\U0001F4AA",
    "thumbsup":    "\U0001F44D",
    "+1":          "\U0001F44D",
    "thumbsdown":  "\U0001F44E",
    "-1":          "\U0001F44E",
    "ok_hand":     "\U0001F44C",
    "heart":       "❤️",
    "broken_heart": "\U0001F494",
    "fire":        "\U0001F525",
    "tada":        "\U0001F389",
    "rocket":      "\U0001F680",
    "star":        "⭐",
    "sparkles":    "✨",
    "zap":         "⚡",
    "bulb":        "\U0001F4A1",
    "warning":     "⚠️",
    "check":       "✅",
    "white_check_mark": "✅",
    "x":           "❌",
    "question":    "❓",
    "exclamation": "❗",
    "100":         "\U0001F4AF",
    "bug":         "\U0001F41B",
    "lock":        "\U0001F512",
    "memo":        "\U0001F4DD",
    "coffee":      "☕",
    "beers":       "\U0001F37B",
    "pizza":       "\U0001F355",
    "sun":         "☀️",
    "moon":        "\U0001F319",
    "rainbow":     "\U0001F308",
    "cat":         "\U0001F431",
    "dog":         "\U0001F436",
}
