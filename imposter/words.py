"""Secret words handed to non-imposter players."""

GAME_WORDS: tuple[str, ...] = (
    "airport", "bakery", "beach", "library", "hospital", "museum",
    "submarine", "circus", "castle", "volcano", "casino", "zoo",
    "stadium", "restaurant", "school", "farm", "jungle", "desert",
    "space station", "pirate ship", "train", "supermarket", "bank", "cinema",
    "police station", "fire station", "hotel", "spa", "gym", "church",
    "igloo", "lighthouse", "bowling alley", "ski resort", "camping site", "theater",
    "pizza", "sushi", "hamburger", "pancake", "spaghetti", "taco",
    "guitar", "piano", "violin", "drum", "trumpet", "saxophone",
    "elephant", "giraffe", "penguin", "dolphin", "kangaroo", "octopus",
    "wizard", "vampire", "robot", "ninja", "astronaut", "detective",
    "soccer", "tennis", "chess", "basketball", "surfing", "karate",
    "umbrella", "telescope", "backpack", "candle", "mirror", "ladder",
)

__all__ = ["GAME_WORDS"]
