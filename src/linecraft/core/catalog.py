"""Subject category catalog used by the classifier.

The catalog is an ordered tuple of ``(category, phrases)`` pairs.  Order
matters: when two categories match the same number of phrases, the one
declared first wins.  Anything that matches no phrase is ``"general"``.

Category names are returned to API callers verbatim, so they keep their
published camelCase spelling.
"""

from __future__ import annotations

GENERAL_CATEGORY = "general"

CATEGORY_CATALOG: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "domesticAnimals",
        (
            "dog", "puppy", "cat", "kitten", "rabbit", "bunny", "hamster", "guinea pig",
            "bird", "parrot", "canary", "fish", "goldfish", "horse", "pony", "cow",
            "pig", "sheep", "goat", "chicken", "duck", "goose", "turkey", "llama", "alpaca",
        ),
    ),
    (
        "wildAnimals",
        (
            "lion", "tiger", "elephant", "giraffe", "zebra", "rhinoceros", "hippopotamus",
            "bear", "wolf", "fox", "deer", "moose", "elk", "squirrel", "raccoon",
            "monkey", "ape", "gorilla", "chimpanzee", "kangaroo", "koala", "panda",
            "leopard", "cheetah", "jaguar", "lynx", "bobcat", "buffalo", "bison", "camel",
        ),
    ),
    (
        "prehistoric",
        (
            "dinosaur", "tyrannosaurus", "t-rex", "triceratops", "stegosaurus", "brontosaurus",
            "velociraptor", "pterodactyl", "mammoth", "saber-tooth", "sabertooth",
            "dino", "prehistoric", "fossil", "ancient",
        ),
    ),
    (
        "marineLife",
        (
            "whale", "dolphin", "shark", "octopus", "squid", "jellyfish", "starfish",
            "seahorse", "turtle", "seal", "walrus", "penguin", "crab", "lobster",
            "shrimp", "manta ray", "stingray", "coral", "seaweed", "submarine",
        ),
    ),
    (
        "insects",
        (
            "butterfly", "bee", "ladybug", "spider", "ant", "grasshopper", "cricket",
            "dragonfly", "caterpillar", "snail", "worm", "beetle", "moth", "firefly", "centipede",
        ),
    ),
    (
        "fantasy",
        (
            "dragon", "unicorn", "fairy", "mermaid", "phoenix", "griffin", "pegasus",
            "centaur", "elf", "dwarf", "troll", "goblin", "ogre", "wizard", "witch",
            "magic", "magical", "enchanted", "mystical", "legendary", "mythical",
            "castle", "tower", "potion", "wand",
        ),
    ),
    (
        "nature",
        (
            "tree", "forest", "flower", "rose", "sunflower", "daisy", "tulip", "lily",
            "garden", "leaf", "grass", "bush", "mountain", "hill", "valley", "river",
            "lake", "ocean", "beach", "desert", "waterfall", "rainbow", "cloud",
            "sun", "moon", "star", "snowflake", "lightning", "landscape", "scenery",
        ),
    ),
    (
        "vehicles",
        (
            "car", "truck", "bus", "motorcycle", "bicycle", "train", "airplane", "helicopter",
            "boat", "ship", "submarine", "rocket", "spaceship", "tank", "tractor",
            "fire truck", "ambulance", "police car", "taxi", "van", "jeep", "sports car",
            "race car", "hot air balloon", "scooter",
        ),
    ),
    (
        "food",
        (
            "cake", "cookie", "ice cream", "pizza", "burger", "sandwich", "apple",
            "banana", "orange", "strawberry", "cherry", "donut", "cupcake", "candy",
            "chocolate", "fruit", "vegetable", "bread", "cheese", "pie",
        ),
    ),
    (
        "objects",
        (
            "house", "home", "chair", "table", "lamp", "clock", "book", "toy",
            "ball", "kite", "balloon", "umbrella", "hat", "shoe", "bag", "cup",
            "bottle", "key", "phone", "computer",
        ),
    ),
    (
        "sports",
        (
            "soccer", "football", "basketball", "baseball", "tennis", "golf", "swimming",
            "running", "cycling", "skating", "skiing", "surfing", "climbing", "dancing", "yoga",
        ),
    ),
    (
        "holidays",
        (
            "christmas", "halloween", "easter", "birthday", "valentine", "thanksgiving",
            "new year", "party", "celebration", "gift", "present", "ornament",
            "decoration", "holiday", "festival",
        ),
    ),
    (
        "music",
        (
            "guitar", "piano", "violin", "drums", "trumpet", "flute", "saxophone",
            "harp", "organ", "microphone",
        ),
    ),
    (
        "mandalas",
        (
            "mandala", "pattern", "geometric", "circular", "symmetrical", "ornate",
            "decorative", "intricate", "spiral", "kaleidoscope",
        ),
    ),
    (
        "abstract",
        (
            "abstract", "artistic", "design", "creative", "modern", "contemporary",
            "minimalist", "stylized", "artistic pattern", "art",
        ),
    ),
)

CATEGORY_NAMES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_CATALOG) + (GENERAL_CATEGORY,)

PHRASE_COUNT: int = sum(len(phrases) for _, phrases in CATEGORY_CATALOG)
