"""Template expansion for coloring page instructions.

A refined prompt is composed in two steps:

1. **Expand** the subject with a category- and complexity-specific template,
   then append an age-appropriate suffix.
2. **Apply specs**: wrap the expanded description in a fixed, ordered list
   of production clauses.

Output Structure
----------------
::

    professional black-and-white line art of, [expanded description],
    optimized for [complexity] complexity level, designed for [age group]
    target audience, featuring [thickness] line thickness, [border clause],
    [style constraints...]

Clauses are joined with ``", "``.  The style constraints always come last
so consumers can rely on the tail of the string when logging or diffing.

Usage
-----
::

    engine = TemplateEngine()
    prompt = engine.render("a cute dog", "domesticAnimals", PreferenceSet())
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .catalog import GENERAL_CATEGORY
from .models import PreferenceSet

logger = logging.getLogger(__name__)

CLAUSE_SEPARATOR = ", "

ROLE_FRAMING = "professional black-and-white line art of"

# ---------------------------------------------------------------------------
# Fixed style constraints.
# Appended to every successful prompt, template-based or completion-enhanced.
# ---------------------------------------------------------------------------

STYLE_CONSTRAINTS: tuple[str, ...] = (
    "coloring book style",
    "family-friendly content",
    "no shading or color fills",
    "clear distinct outlines",
    "high contrast black lines on white background",
    "300 DPI print quality",
    "suitable for coloring with crayons, markers, or colored pencils",
)

# ---------------------------------------------------------------------------
# Enhancement templates: category -> complexity -> format string.
# ---------------------------------------------------------------------------

_TEMPLATES: dict[str, dict[str, str]] = {
    "domesticAnimals": {
        "simple": "friendly {subject} with basic features, cute expression, and simple pose",
        "medium": (
            "detailed {subject} with natural fur/feather textures, expressive eyes, "
            "playful pose, and simple background elements"
        ),
        "detailed": (
            "intricate {subject} with complex fur/feather patterns, highly detailed anatomical "
            "features, dynamic pose, environmental context, and companion elements"
        ),
    },
    "wildAnimals": {
        "simple": "majestic {subject} with basic features, calm expression, and natural stance",
        "medium": (
            "detailed {subject} with natural textures, environmental context, "
            "characteristic features, and habitat elements"
        ),
        "detailed": (
            "intricate {subject} with complex patterns, detailed anatomy, natural habitat scene, "
            "weather effects, and ecosystem elements"
        ),
    },
    "prehistoric": {
        "simple": (
            "friendly {subject} with basic dinosaur features, simple prehistoric elements, "
            "and gentle appearance"
        ),
        "medium": (
            "detailed {subject} with scale textures, prehistoric vegetation, volcanic landscape, "
            "and period-appropriate elements"
        ),
        "detailed": (
            "intricate {subject} with complex scale patterns, detailed prehistoric ecosystem, "
            "volcanic activity, ancient plant life, and geological formations"
        ),
    },
    "marineLife": {
        "simple": (
            "graceful {subject} with basic aquatic features, simple water elements, "
            "and peaceful expression"
        ),
        "medium": (
            "detailed {subject} with natural textures, ocean currents, coral reef elements, "
            "and marine ecosystem context"
        ),
        "detailed": (
            "intricate {subject} with complex patterns, detailed underwater scene, "
            "coral formations, sea plants, and diverse marine life"
        ),
    },
    "insects": {
        "simple": (
            "cute {subject} with basic insect features, simple garden elements, "
            "and friendly appearance"
        ),
        "medium": (
            "detailed {subject} with wing patterns, garden setting, flower elements, "
            "and natural textures"
        ),
        "detailed": (
            "intricate {subject} with complex wing designs, detailed garden ecosystem, "
            "various flowers, leaves, and micro-environment elements"
        ),
    },
    "fantasy": {
        "simple": (
            "magical {subject} with basic fantasy elements, gentle mystical features, "
            "and enchanted appearance"
        ),
        "medium": (
            "enchanted {subject} with mystical details, magical sparkles, fantasy landscape, "
            "and ethereal elements"
        ),
        "detailed": (
            "intricate {subject} with complex magical patterns, detailed fantasy realm, "
            "mystical creatures, magical phenomena, and elaborate enchanted environment"
        ),
    },
    "nature": {
        "simple": (
            "beautiful {subject} with basic natural features, simple environmental elements, "
            "and peaceful setting"
        ),
        "medium": (
            "detailed {subject} with natural textures, seasonal elements, wildlife touches, "
            "and environmental context"
        ),
        "detailed": (
            "intricate {subject} with complex natural patterns, detailed ecosystem, weather "
            "effects, multiple layers of vegetation, and rich environmental detail"
        ),
    },
    "vehicles": {
        "simple": "cool {subject} with basic vehicle features, simple design elements, and clean lines",
        "medium": (
            "detailed {subject} with mechanical features, environmental setting, "
            "motion elements, and contextual background"
        ),
        "detailed": (
            "intricate {subject} with complex mechanical details, dynamic scene, environmental "
            "context, technical elements, and rich background details"
        ),
    },
    "food": {
        "simple": (
            "delicious {subject} with basic food features, simple presentation, "
            "and appetizing appearance"
        ),
        "medium": (
            "detailed {subject} with textures, garnishes, serving elements, "
            "and kitchen/dining context"
        ),
        "detailed": (
            "intricate {subject} with complex textures, elaborate presentation, detailed "
            "ingredients, cooking elements, and rich culinary scene"
        ),
    },
    "objects": {
        "simple": "useful {subject} with basic design features, simple form, and clean presentation",
        "medium": (
            "detailed {subject} with textures, functional elements, environmental setting, "
            "and contextual details"
        ),
        "detailed": (
            "intricate {subject} with complex design patterns, detailed components, rich "
            "environmental context, and elaborate decorative elements"
        ),
    },
    "sports": {
        "simple": "active {subject} with basic sports elements, simple equipment, and dynamic pose",
        "medium": (
            "detailed {subject} with sports equipment, playing field elements, action details, "
            "and athletic context"
        ),
        "detailed": (
            "intricate {subject} with complex equipment details, detailed sports venue, crowd "
            "elements, dynamic action, and rich athletic environment"
        ),
    },
    "holidays": {
        "simple": (
            "festive {subject} with basic holiday elements, simple decorations, "
            "and celebratory mood"
        ),
        "medium": (
            "detailed {subject} with holiday decorations, seasonal elements, traditional motifs, "
            "and festive atmosphere"
        ),
        "detailed": (
            "intricate {subject} with elaborate decorations, detailed traditional elements, "
            "complex patterns, celebratory scenes, and rich holiday atmosphere"
        ),
    },
    "music": {
        "simple": (
            "musical {subject} with basic instrument features, simple musical elements, "
            "and harmonic design"
        ),
        "medium": (
            "detailed {subject} with musical notes, performance setting, acoustic elements, "
            "and artistic details"
        ),
        "detailed": (
            "intricate {subject} with complex musical patterns, detailed performance scene, "
            "ornate decorations, musical notation, and rich artistic environment"
        ),
    },
    "mandalas": {
        "simple": (
            "geometric {subject} with basic symmetrical patterns, simple repetitive elements, "
            "and balanced design"
        ),
        "medium": (
            "detailed {subject} with intricate geometric patterns, layered symmetry, "
            "decorative elements, and balanced complexity"
        ),
        "detailed": (
            "complex {subject} with elaborate geometric designs, multiple pattern layers, "
            "sophisticated symmetrical elements, and rich decorative details"
        ),
    },
    "abstract": {
        "simple": "artistic {subject} with basic design elements, simple forms, and creative expression",
        "medium": (
            "detailed {subject} with artistic patterns, creative elements, expressive forms, "
            "and design complexity"
        ),
        "detailed": (
            "intricate {subject} with complex artistic patterns, elaborate design elements, "
            "sophisticated forms, and rich creative expression"
        ),
    },
    GENERAL_CATEGORY: {
        "simple": "simple {subject} with basic details and clear features",
        "medium": "detailed {subject} with enhanced features, textures, and contextual elements",
        "detailed": "intricate {subject} with complex details, rich context, and sophisticated elements",
    },
}

TEMPLATE_CATALOG: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {category: MappingProxyType(variants) for category, variants in _TEMPLATES.items()}
)

AGE_SUFFIXES: Mapping[str, str] = MappingProxyType(
    {
        "kids": (
            ", with friendly expressions, safe rounded features, bright cheerful elements, "
            "and child-appropriate simplicity"
        ),
        "teens": (
            ", with moderate detail, contemporary style elements, dynamic composition, "
            "and age-appropriate complexity"
        ),
        "adults": (
            ", with sophisticated details, complex patterns, artistic elements, intricate design, "
            "and mature aesthetic appeal"
        ),
    }
)

NEUTRAL_AGE_SUFFIX = ", with balanced detail level and universal appeal"


class TemplateEngine:
    """Expands subjects into full coloring page instructions.

    The engine holds no per-call state; one instance can be shared by any
    number of concurrent callers.

    Args:
        templates: Category -> complexity -> format string mapping.  Each
            format string takes a single ``{subject}`` placeholder.
        age_suffixes: Age group -> suffix mapping.
    """

    def __init__(
        self,
        templates: Mapping[str, Mapping[str, str]] = TEMPLATE_CATALOG,
        age_suffixes: Mapping[str, str] = AGE_SUFFIXES,
    ):
        self.templates = templates
        self.age_suffixes = age_suffixes

    def age_suffix(self, age_group: str) -> str:
        return self.age_suffixes.get(age_group, NEUTRAL_AGE_SUFFIX)

    def expand(self, sanitized_text: str, category: str, complexity: str, age_group: str) -> str:
        """Elaborate a subject description.

        Args:
            sanitized_text: Subject text that already passed the sanitizer.
            category: Detected category.  Categories without templates use
                the ``general`` templates.
            complexity: ``simple``, ``medium`` or ``detailed``.  Any other
                value leaves the subject text unchanged.
            age_group: ``kids``, ``teens`` or ``adults``.  Any other value
                gets a neutral suffix.

        Returns:
            The elaborated description with its age suffix.
        """
        subject = sanitized_text.strip()
        variants = self.templates.get(category) or self.templates[GENERAL_CATEGORY]
        template = variants.get(complexity)
        if template is None:
            logger.debug(f"No {complexity!r} template for {category!r}; using subject as-is")
            enhanced = subject
        else:
            enhanced = template.format(subject=subject)
        return f"{enhanced}{self.age_suffix(age_group)}"

    def apply_specs(self, description: str, preferences: PreferenceSet) -> str:
        """Wrap a description in the ordered production clauses."""
        border_clause = (
            "with elegant decorative border elements"
            if preferences.border == "with"
            else "with clean edges and no border"
        )
        clauses = [
            ROLE_FRAMING,
            description,
            f"optimized for {preferences.complexity} complexity level",
            f"designed for {preferences.age_group} target audience",
            f"featuring {preferences.line_thickness} line thickness",
            border_clause,
            *STYLE_CONSTRAINTS,
        ]
        return CLAUSE_SEPARATOR.join(clauses)

    def render(self, sanitized_text: str, category: str, preferences: PreferenceSet) -> str:
        """Expand a subject and apply the production clauses in one step."""
        description = self.expand(
            sanitized_text,
            category,
            preferences.complexity,
            preferences.age_group,
        )
        return self.apply_specs(description, preferences)
