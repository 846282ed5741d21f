"""
Care tip rule catalog.

Each rule pairs a pure predicate over TipContext with the tip content and a
priority (1-10, higher = more important). Order is significant: the weighted
draw in tip_selector walks the catalog in this order.

Predicates must never raise on missing data. Weather rules check that the
forecast day they read exists, and rules gated on a calendar month use the
position of the month inside its season so the same rule fires in March up
north and in September down south.
"""

from __future__ import annotations
from typing import Dict, Optional

from ..constants import SEASON_FALL, SEASON_SPRING, SEASON_SUMMER, SEASON_WINTER
from ..models import CareTip, TipContext, WeatherData
from .seasons import season_month_index


# ============================================================================
# PREDICATE HELPERS
# ============================================================================

def has_plant_type(ctx: TipContext, type_id: str) -> bool:
    return any(plant.type_id == type_id for plant in ctx.plants)


def no_rain_for_days(weather: Optional[WeatherData], days: int) -> bool:
    """True when the next `days` forecast days all stay under 1 mm of rain."""
    if weather is None or len(weather.daily) < days:
        return False
    return all(day.precipitation < 1 for day in weather.daily[:days])


def consecutive_hot_days(weather: Optional[WeatherData], threshold: float, count: int) -> bool:
    """True when the first `count` forecast days all reach `threshold` °C."""
    if weather is None or len(weather.daily) < count:
        return False
    return all(day.temp_max >= threshold for day in weather.daily[:count])


def _in_season(ctx: TipContext, *seasons: str) -> bool:
    return ctx.season in seasons


def _month_in_season(ctx: TipContext, first: int, last: int) -> bool:
    return first <= season_month_index(ctx.today) <= last


def _has_plants(ctx: TipContext, more_than: int = 0) -> bool:
    return len(ctx.plants) > more_than


def _current(ctx: TipContext):
    return ctx.weather.current if ctx.weather else None


def _current_humidity_above(ctx: TipContext, value: float) -> bool:
    current = _current(ctx)
    return current is not None and current.humidity > value


def _current_uv_between(ctx: TipContext, low: float, high: Optional[float] = None, strict_low: bool = False) -> bool:
    current = _current(ctx)
    if current is None or current.uv_index is None:
        return False
    uv = current.uv_index
    above = uv > low if strict_low else uv >= low
    return above and (high is None or uv <= high)


def _forecast_value(ctx: TipContext, index: int, attr: str):
    day = ctx.weather.day(index) if ctx.weather else None
    return getattr(day, attr) if day is not None else None


def _cloudy(ctx: TipContext) -> bool:
    current = _current(ctx)
    return current is not None and 2 <= current.weather_code <= 3


def _hot_now(ctx: TipContext) -> bool:
    current = _current(ctx)
    return current is not None and current.temperature > 30


def _rain_tomorrow(ctx: TipContext) -> bool:
    precipitation = _forecast_value(ctx, 1, "precipitation")
    return precipitation is not None and precipitation > 5


def _windy(ctx: TipContext, speed: float) -> bool:
    current = _current(ctx)
    return current is not None and current.wind_speed > speed


def _cold_night(ctx: TipContext) -> bool:
    temp_min = _forecast_value(ctx, 0, "temp_min")
    return temp_min is not None and temp_min < 5


def _temperature_swing(ctx: TipContext) -> bool:
    today = ctx.weather.today if ctx.weather else None
    return today is not None and (today.temp_max - today.temp_min) > 18


def _frost_risk(ctx: TipContext) -> bool:
    today = ctx.weather.today if ctx.weather else None
    return today is not None and today.temp_min < 3 and ctx.weather.current.humidity > 70


def _heavy_rain_today(ctx: TipContext) -> bool:
    precipitation = _forecast_value(ctx, 0, "precipitation")
    return precipitation is not None and precipitation > 20


def _calm_dry_air(ctx: TipContext) -> bool:
    current = _current(ctx)
    return current is not None and current.wind_speed < 5 and current.humidity < 40


def _after_rain(ctx: TipContext) -> bool:
    today = _forecast_value(ctx, 0, "precipitation")
    tomorrow = _forecast_value(ctx, 1, "precipitation")
    if today is None or tomorrow is None:
        return False
    return today > 10 and tomorrow < 2


def _spider_mite_weather(ctx: TipContext) -> bool:
    current = _current(ctx)
    if current is None:
        # Without weather, summer alone is enough of a signal
        return ctx.season == SEASON_SUMMER
    return current.temperature > 27 and current.humidity < 50


def _warm_and_humid(ctx: TipContext) -> bool:
    current = _current(ctx)
    return current is not None and current.humidity > 70 and current.temperature > 20


def _frequent_watering(ctx: TipContext) -> bool:
    return any(plant.watering_interval_days <= 3 for plant in ctx.plants)


# ============================================================================
# CATALOG
# ============================================================================

CARE_TIPS = (
    # --- Seasonal ---
    CareTip(
        id="winter-less-water",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_WINTER,
        icon="❄️",
        title="Winter watering",
        message="In winter, cut watering in half. Plants grow slower and need less water.",
        priority=8,
    ),
    CareTip(
        id="spring-fertilize",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SPRING,
        icon="🌱",
        title="Time to fertilize",
        message="Spring is the best time to fertilize. Plants are waking up and need nutrients.",
        priority=9,
    ),
    CareTip(
        id="summer-early-water",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SUMMER,
        icon="🌅",
        title="Water early",
        message="In summer, water first thing in the morning or at dusk so the water doesn't evaporate.",
        priority=8,
    ),
    CareTip(
        id="fall-prepare",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_FALL,
        icon="🍂",
        title="Get ready for winter",
        message="Fall is a good time to prune and prepare your plants for the cold ahead.",
        priority=7,
    ),
    CareTip(
        id="spring-repot",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SPRING,
        icon="🪴",
        title="Spring repotting",
        message="If your plants have outgrown their pots, now is the best time to repot them.",
        priority=6,
    ),
    CareTip(
        id="summer-mulch",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SUMMER,
        icon="🌿",
        title="Protect the soil",
        message="Add mulch or bark over the soil to keep moisture in and shield the roots from heat.",
        priority=5,
    ),

    # --- Weather ---
    CareTip(
        id="cloudy-less-evaporation",
        category="weather",
        condition=_cloudy,
        icon="☁️",
        title="Cloudy day",
        message="Cloudy days mean less evaporation. You can space out watering a little more.",
        priority=6,
    ),
    CareTip(
        id="high-humidity-fungus",
        category="weather",
        condition=lambda ctx: _current_humidity_above(ctx, 75),
        icon="💧",
        title="High humidity",
        message="With high humidity, watch out for fungus. Make sure there is good airflow between plants.",
        priority=7,
    ),
    CareTip(
        id="hot-day-shade",
        category="weather",
        condition=_hot_now,
        icon="🔥",
        title="Very hot",
        message="Above 30 degrees, consider moving sensitive plants to partial shade.",
        priority=9,
    ),
    CareTip(
        id="rain-coming",
        category="weather",
        condition=_rain_tomorrow,
        icon="🌧️",
        title="Rain tomorrow",
        message="Rain is expected tomorrow. You can skip watering your outdoor plants.",
        priority=8,
    ),
    CareTip(
        id="windy-protect",
        category="weather",
        condition=lambda ctx: _windy(ctx, 30),
        icon="💨",
        title="Windy day",
        message="With strong wind, protect delicate plants and check that pots are stable.",
        priority=7,
    ),
    CareTip(
        id="cold-night",
        category="weather",
        condition=_cold_night,
        icon="🥶",
        title="Cold night",
        message="Low temperatures are expected tonight. Consider bringing cold-sensitive plants inside.",
        priority=9,
    ),

    # --- Care ---
    CareTip(
        id="yellow-leaves-overwater",
        category="care",
        condition=lambda ctx: True,
        icon="💛",
        title="Yellow leaves",
        message="Yellow leaves can mean too much water. Let the soil dry between waterings.",
        priority=4,
    ),
    CareTip(
        id="brown-tips-humidity",
        category="care",
        condition=lambda ctx: True,
        icon="🤎",
        title="Brown tips",
        message="Leaves with brown tips usually point to low humidity. Try misting them with water.",
        priority=4,
    ),
    CareTip(
        id="droopy-leaves",
        category="care",
        condition=lambda ctx: True,
        icon="😔",
        title="Droopy leaves",
        message="If the leaves droop but the soil is wet, it may be overwatered. Let it dry out.",
        priority=5,
    ),
    CareTip(
        id="pale-leaves-light",
        category="care",
        condition=lambda ctx: True,
        icon="🌞",
        title="Pale leaves",
        message="Pale or stretched leaves signal a lack of light. Move the plant somewhere brighter.",
        priority=4,
    ),
    CareTip(
        id="check-drainage",
        category="care",
        condition=lambda ctx: True,
        icon="🕳️",
        title="Good drainage",
        message="Make sure every pot has drainage holes. Roots should never sit in water.",
        priority=5,
    ),

    # --- General ---
    CareTip(
        id="rotate-pots",
        category="general",
        condition=lambda ctx: True,
        icon="🔄",
        title="Rotate your pots",
        message="Rotate pots every 1-2 weeks so plants grow evenly instead of leaning toward the light.",
        priority=3,
    ),
    CareTip(
        id="clean-leaves",
        category="general",
        condition=lambda ctx: True,
        icon="🧹",
        title="Clean the leaves",
        message="Wipe the leaves with a damp cloth every 2 weeks. They breathe better and absorb more light.",
        priority=3,
    ),
    CareTip(
        id="water-quality",
        category="general",
        condition=lambda ctx: True,
        icon="💧",
        title="Rested water",
        message="Let tap water sit for 24 hours before watering so the chlorine evaporates.",
        priority=2,
    ),
    CareTip(
        id="morning-routine",
        category="general",
        condition=_has_plants,
        icon="☀️",
        title="Morning routine",
        message="Checking your plants every morning helps you catch problems early. A quick look is enough.",
        priority=2,
    ),
    CareTip(
        id="group-humidity",
        category="general",
        condition=lambda ctx: _has_plants(ctx, 2),
        icon="👯",
        title="Group your plants",
        message="Grouping plants creates a more humid microclimate. They help each other out.",
        priority=3,
    ),
    CareTip(
        id="quarantine-new",
        category="general",
        condition=lambda ctx: True,
        icon="🏥",
        title="Quarantine",
        message="Keep new plants apart for 2 weeks before putting them with the others. It prevents pests.",
        priority=4,
    ),

    # --- Plant type: succulents ---
    CareTip(
        id="suculenta-propagation",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "suculenta"),
        icon="🪴",
        title="Propagate your succulents",
        message="You can propagate succulents from a healthy leaf: let it dry 2-3 days and lay it on moist soil. Roots appear within weeks.",
        priority=3,
    ),
    CareTip(
        id="suculenta-substrate",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "suculenta"),
        icon="🏜️",
        title="Soil for succulents",
        message="Use a 50/50 mix of potting soil with perlite or coarse sand. Succulents need excellent drainage so they don't rot.",
        priority=5,
    ),
    CareTip(
        id="suculenta-sunburn",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "suculenta") and ctx.season == SEASON_SUMMER,
        icon="☀️",
        title="Sunburned succulents",
        message="White or brown patches on succulents can be sunburn. Move them to partial shade and reintroduce sun gradually.",
        priority=7,
    ),
    CareTip(
        id="suculenta-etiolation",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "suculenta") and _in_season(ctx, SEASON_WINTER, SEASON_FALL),
        icon="📏",
        title="Stretched succulents",
        message="If your succulent stretches and its leaves spread apart, it needs more light. Move it closer to a window or give it a few hours of direct sun.",
        priority=6,
    ),
    CareTip(
        id="suculenta-watering-method",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "suculenta"),
        icon="💦",
        title="How to water succulents",
        message="Soak succulents thoroughly, then let them dry out completely. Deep watering beats frequent sips.",
        priority=5,
    ),

    # --- Plant type: ferns ---
    CareTip(
        id="helecho-humidity",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "helecho"),
        icon="💨",
        title="Humidity for ferns",
        message="Ferns love humidity. Mist the fronds 2-3 times a week or set them on a tray of pebbles and water.",
        priority=6,
    ),
    CareTip(
        id="helecho-bathroom",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "helecho"),
        icon="🚿",
        title="Ferns in the bathroom",
        message="A bathroom is ideal for ferns: shower steam gives them the humidity they need, as long as there is some natural light.",
        priority=4,
    ),
    CareTip(
        id="helecho-no-direct-sun",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "helecho") and ctx.season == SEASON_SUMMER,
        icon="🌥️",
        title="Ferns and direct sun",
        message="Never put a fern in direct sun; the fronds burn right away. Bright indirect light is ideal.",
        priority=7,
    ),
    CareTip(
        id="helecho-brown-fronds",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "helecho"),
        icon="✂️",
        title="Dry fern fronds",
        message="Cut brown or dry fronds at the base. They won't recover and they drain the plant's energy.",
        priority=4,
    ),

    # --- Plant type: cacti ---
    CareTip(
        id="cactus-dormancy",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "cactus") and ctx.season == SEASON_WINTER,
        icon="😴",
        title="Cactus winter rest",
        message="Cacti go dormant in winter. Water very little (once a month or less) and keep them somewhere cool so they bloom better in spring.",
        priority=7,
    ),
    CareTip(
        id="cactus-overwatering",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "cactus"),
        icon="⚠️",
        title="Soft cactus = too much water",
        message="A soft or translucent cactus is overwatered. Unpot it, let the roots dry and replant in dry soil.",
        priority=8,
    ),
    CareTip(
        id="cactus-repotting",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "cactus") and ctx.season == SEASON_SPRING,
        icon="🧤",
        title="Repotting cacti",
        message="Wrap the cactus in several layers of newspaper or wear thick leather gloves. Wait 5-7 days after repotting before watering.",
        priority=5,
    ),

    # --- Plant type: herbs ---
    CareTip(
        id="aromatica-harvest",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "aromatica"),
        icon="🌿",
        title="Harvest herbs often",
        message="Regular cutting makes herbs grow bushier. Never cut more than a third of the plant at once.",
        priority=5,
    ),
    CareTip(
        id="aromatica-pinch",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "aromatica") and _in_season(ctx, SEASON_SPRING, SEASON_SUMMER),
        icon="✂️",
        title="Pinch your herbs",
        message="When basil or mint starts to flower, pinch off the flower tips so the plant puts its energy into leaves instead of seeds.",
        priority=6,
    ),
    CareTip(
        id="aromatica-companion",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "aromatica") and _has_plants(ctx, 1),
        icon="🤝",
        title="Herbs as companions",
        message="Basil near tomatoes repels aphids. Rosemary and lavender attract pollinators. Use herbs as garden companions.",
        priority=3,
    ),
    CareTip(
        id="aromatica-sun-needs",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "aromatica"),
        icon="☀️",
        title="Sun for herbs",
        message="Most herbs need at least 6 hours of direct sun. Without enough light they lose flavor and aroma.",
        priority=5,
    ),

    # --- Plant type: climbers ---
    CareTip(
        id="trepa-support",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "trepa"),
        icon="🪜",
        title="Support for climbers",
        message="Climbers need something to climb: a moss pole, a trellis or taut strings. Without support they sprawl and grow weaker.",
        priority=6,
    ),
    CareTip(
        id="trepa-aerial-roots",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "trepa"),
        icon="🌱",
        title="Aerial roots",
        message="Aerial roots on climbers are normal and help them climb. Guide them toward the moss pole so they grip better.",
        priority=3,
    ),
    CareTip(
        id="trepa-propagation",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "trepa") and ctx.season == SEASON_SPRING,
        icon="🌿",
        title="Propagate climbers from cuttings",
        message="In spring, take cuttings from your climbers. Cut below a node, strip the lower leaves and keep it in water until it roots.",
        priority=4,
    ),

    # --- Plant type: fruit plants ---
    CareTip(
        id="frutal-pollination",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "frutal") and ctx.season == SEASON_SPRING,
        icon="🐝",
        title="Pollinating fruit plants",
        message="In spring make sure fruit plants get pollinators. If you don't see bees, brush a soft paintbrush from flower to flower.",
        priority=7,
    ),
    CareTip(
        id="frutal-pruning-time",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "frutal") and ctx.season == SEASON_WINTER,
        icon="✂️",
        title="Winter pruning for fruit plants",
        message="Winter is the time to prune deciduous fruit plants. Remove dead, crossing and sucker branches so they produce better in spring.",
        priority=8,
    ),
    CareTip(
        id="frutal-fruit-set",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "frutal") and ctx.season == SEASON_SUMMER,
        icon="🍊",
        title="Thin the young fruit",
        message="If your fruit plant sets lots of small fruit, remove some. Thinning makes the rest grow bigger and sweeter.",
        priority=5,
    ),

    # --- Plant type: flowering plants ---
    CareTip(
        id="floral-deadheading",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "floral"),
        icon="🌸",
        title="Remove spent flowers",
        message="Cut flowers as they fade. The plant won't waste energy on seeds and will give you more new blooms.",
        priority=5,
    ),
    CareTip(
        id="floral-bloom-cycle",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "floral") and ctx.season == SEASON_SPRING,
        icon="🌺",
        title="Bloom cycle",
        message="Flowering plants need more nutrients in spring. Use a fertilizer with more phosphorus (the middle NPK number) to encourage blooms.",
        priority=6,
    ),
    CareTip(
        id="floral-light-hours",
        category="plant_type",
        condition=lambda ctx: has_plant_type(ctx, "floral"),
        icon="💡",
        title="Light and blooming",
        message="Many flowers need a certain number of light hours to bloom. If yours won't flower, check that it gets enough direct sun.",
        priority=4,
    ),

    # --- Seasonal, month-gated ---
    CareTip(
        id="early-spring-pests",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SPRING and _month_in_season(ctx, 0, 1),
        icon="🐛",
        title="Spring pests",
        message="Warmer days bring aphids and mealybugs. Check the undersides of leaves and new stems. Catching them early is key.",
        priority=8,
    ),
    CareTip(
        id="late-spring-growth",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SPRING and _month_in_season(ctx, 2, 2),
        icon="🌿",
        title="Growth spurt",
        message="Late spring is full-speed growth. Make sure your plants have room, nutrients and enough water to keep up.",
        priority=6,
    ),
    CareTip(
        id="summer-heatwave",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SUMMER and consecutive_hot_days(ctx.weather, 35, 3),
        icon="🌡️",
        title="Heatwave",
        message="Several days in a row above 35 degrees. Water more often, mist the leaves at dusk and move pots into the shade if you can.",
        priority=10,
    ),
    CareTip(
        id="summer-vacation-prep",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SUMMER,
        icon="🧳",
        title="Going on vacation?",
        message="Before you leave: water well, group pots in partial shade and set upturned bottles as slow drippers. Ask someone to check every 3-4 days.",
        priority=5,
    ),
    CareTip(
        id="fall-bring-indoors",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_FALL and _month_in_season(ctx, 1, 2),
        icon="🏠",
        title="Bring sensitive plants in",
        message="Nights are getting cooler. Tropicals, succulents and flowering plants that spent summer outside should come indoors now.",
        priority=7,
    ),
    CareTip(
        id="fall-reduce-fertilizer",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_FALL,
        icon="⏸️",
        title="Ease off the fertilizer",
        message="Reduce feeding in fall. Plants are slowing down and don't need as many nutrients; pushing them now weakens them.",
        priority=6,
    ),
    CareTip(
        id="winter-dormancy",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_WINTER,
        icon="💤",
        title="Respect the rest",
        message="Many plants stop growing in winter. Don't worry if you see no new leaves; it's normal. Water little and don't fertilize.",
        priority=5,
    ),
    CareTip(
        id="winter-indoor-humidity",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_WINTER,
        icon="🏠",
        title="Indoor humidity in winter",
        message="Heating dries the air. Mist tropical plants, set them on pebble trays or group pots to raise humidity.",
        priority=6,
    ),
    CareTip(
        id="spring-check-roots",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SPRING,
        icon="🔍",
        title="Check the roots",
        message="In early spring look for roots poking out of the drainage holes. It means the plant needs a bigger pot.",
        priority=5,
    ),
    CareTip(
        id="fall-last-pruning",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_FALL,
        icon="✂️",
        title="Last pruning of the year",
        message="Before the cold arrives, clear dry leaves and dead branches. Avoid hard pruning now; new shoots won't survive winter.",
        priority=5,
    ),
    CareTip(
        id="winter-light-position",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_WINTER,
        icon="🪟",
        title="Make the most of the light",
        message="Days are shorter in winter. Move plants near bright windows; winter sun is gentle and won't burn them.",
        priority=5,
    ),
    CareTip(
        id="summer-bottom-watering",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SUMMER,
        icon="🛁",
        title="Bottom watering",
        message="In summer try watering from below: stand the pot in water for 15-20 minutes so the soil soaks up what it needs evenly.",
        priority=4,
    ),
    CareTip(
        id="spring-seed-starting",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_SPRING and _month_in_season(ctx, 0, 1),
        icon="🌱",
        title="Seed starting season",
        message="Early spring is ideal for starting basil, tomato and parsley seeds. Use seed trays with moist soil and keep them in the light.",
        priority=5,
    ),
    CareTip(
        id="fall-compost-leaves",
        category="seasonal",
        condition=lambda ctx: ctx.season == SEASON_FALL,
        icon="🍂",
        title="Use the fallen leaves",
        message="Dry autumn leaves are gold for compost. Pile them up, keep them moist and in a few months you'll have homemade compost.",
        priority=3,
    ),

    # --- Weather, forecast-based ---
    CareTip(
        id="uv-high-protect",
        category="weather",
        condition=lambda ctx: _current_uv_between(ctx, 8, strict_low=True),
        icon="🛡️",
        title="Very high UV",
        message="The UV index is extremely high. Indoor plants near windows can burn. Move pots back a little or use a light curtain.",
        priority=8,
    ),
    CareTip(
        id="dry-spell-alert",
        category="weather",
        condition=lambda ctx: no_rain_for_days(ctx.weather, 5),
        icon="🏜️",
        title="Dry spell ahead",
        message="No rain is expected in the next 5 days. Outdoor plants will need extra watering, especially the ones in full sun.",
        priority=7,
    ),
    CareTip(
        id="temp-swing-stress",
        category="weather",
        condition=_temperature_swing,
        icon="🎢",
        title="Sharp temperature swing",
        message="There's a big gap between today's high and low. That thermal stress can affect sensitive plants; bring them in at night if you can.",
        priority=7,
    ),
    CareTip(
        id="consecutive-heat",
        category="weather",
        condition=lambda ctx: consecutive_hot_days(ctx.weather, 32, 3),
        icon="🔥",
        title="Persistent heat",
        message="Several days of strong heat. Water twice as often and check that the soil isn't pulling away from the sides of the pot.",
        priority=8,
    ),
    CareTip(
        id="frost-risk",
        category="weather",
        condition=_frost_risk,
        icon="🧊",
        title="Frost risk",
        message="Cold plus high humidity means possible frost. Cover outdoor plants with frost cloth or bring pots inside tonight.",
        priority=10,
    ),
    CareTip(
        id="heavy-rain-drainage",
        category="weather",
        condition=_heavy_rain_today,
        icon="⛈️",
        title="Heavy rain",
        message="Heavy rain is expected. Make sure outdoor pots don't waterlog; move the ones without good drainage under cover.",
        priority=8,
    ),
    CareTip(
        id="low-wind-mist",
        category="weather",
        condition=_calm_dry_air,
        icon="🌫️",
        title="Dry, still air",
        message="With little breeze and low humidity, plants transpire faster. A good moment to mist the leaves and set a saucer of water nearby.",
        priority=5,
    ),
    CareTip(
        id="uv-moderate-outdoor-time",
        category="weather",
        condition=lambda ctx: _current_uv_between(ctx, 3, 5),
        icon="🌤️",
        title="Moderate UV: good for acclimating",
        message="UV is moderate, perfect for giving indoor plants some sun. Start with 1-2 hours in partial shade and increase gradually.",
        priority=3,
    ),
    CareTip(
        id="post-rain-check",
        category="weather",
        condition=_after_rain,
        icon="🌈",
        title="After the rain",
        message="After heavy rain, check your pots: empty full saucers and make sure mud isn't blocking the drainage holes.",
        priority=5,
    ),
    CareTip(
        id="extreme-wind",
        category="weather",
        condition=lambda ctx: _windy(ctx, 50),
        icon="🌪️",
        title="Very strong winds",
        message="With winds above 50 km/h, bring light pots indoors and tie climbers to their supports. Weak branches may snap.",
        priority=9,
    ),

    # --- Pests ---
    CareTip(
        id="pest-spider-mites",
        category="pest",
        condition=_spider_mite_weather,
        icon="🕷️",
        title="Watch for spider mites",
        message="Hot, dry weather is paradise for spider mites. Look for tiny dots or fine webbing on leaves. Spray with soapy water or neem oil.",
        priority=8,
    ),
    CareTip(
        id="pest-mealybugs",
        category="pest",
        condition=_has_plants,
        icon="🐛",
        title="Mealybugs",
        message="White cottony specks on stems or leaf joints are mealybugs. Remove them with a cotton swab dipped in alcohol or apply neem oil.",
        priority=7,
    ),
    CareTip(
        id="pest-aphids",
        category="pest",
        condition=lambda ctx: _in_season(ctx, SEASON_SPRING, SEASON_SUMMER),
        icon="🟢",
        title="Aphids spotted",
        message="Aphids show up on tender shoots in spring and summer. Try a strong water spray, potassium soap or bringing ladybugs into your garden.",
        priority=7,
    ),
    CareTip(
        id="pest-fungus-gnats",
        category="pest",
        condition=lambda ctx: _current_humidity_above(ctx, 65),
        icon="🦟",
        title="Fungus gnats",
        message="Tiny black flies come from damp soil. Let the top layer dry between waterings and add a layer of coarse sand on top.",
        priority=6,
    ),
    CareTip(
        id="pest-white-mold",
        category="pest",
        condition=lambda ctx: _current_humidity_above(ctx, 80),
        icon="🍄",
        title="White mold on the soil",
        message="White mold on the soil means too much moisture and poor airflow. Scrape it off, let the soil dry and improve ventilation.",
        priority=6,
    ),
    CareTip(
        id="pest-scale-insects",
        category="pest",
        condition=_has_plants,
        icon="🛡️",
        title="Scale insects",
        message="Brown scales stuck to stems and leaf veins are scale insects. Scrape them off with a fingernail and apply neem oil preventively.",
        priority=6,
    ),
    CareTip(
        id="pest-leaf-spot",
        category="pest",
        condition=_warm_and_humid,
        icon="🟤",
        title="Leaf spots",
        message="Humidity plus heat is a breeding ground for fungus. If you see brown or black spots with a yellow halo, remove the leaf and improve airflow.",
        priority=7,
    ),
    CareTip(
        id="pest-thrips",
        category="pest",
        condition=lambda ctx: ctx.season == SEASON_SUMMER,
        icon="🪲",
        title="Thrips on your plants",
        message="Thrips leave silvery marks on leaves and are hard to see. Shake a leaf over white paper; if tiny bugs move, treat with neem.",
        priority=6,
    ),
    CareTip(
        id="pest-root-rot",
        category="pest",
        condition=_frequent_watering,
        icon="🤒",
        title="Root rot",
        message="Plants you water often are prone to rot. If a plant wilts even though the soil is wet, check the roots: they should be white, not brown.",
        priority=8,
    ),
    CareTip(
        id="pest-neem-preventive",
        category="pest",
        condition=lambda ctx: ctx.season == SEASON_SPRING and _has_plants(ctx),
        icon="🧴",
        title="Preventive neem in spring",
        message="Applying neem oil every 15 days in spring prevents a lot of pests. Spray at dusk so the leaves don't burn.",
        priority=6,
    ),

    # --- Fertilizer ---
    CareTip(
        id="fertilizer-npk-basics",
        category="fertilizer",
        condition=_has_plants,
        icon="🔬",
        title="What is NPK?",
        message="Fertilizers list NPK: Nitrogen (leaves), Phosphorus (flowers and roots), Potassium (overall health). More N for green leaves, more P for flowers.",
        priority=3,
    ),
    CareTip(
        id="fertilizer-spring-schedule",
        category="fertilizer",
        condition=lambda ctx: ctx.season == SEASON_SPRING,
        icon="📅",
        title="Fertilize every 2 weeks",
        message="In spring and summer, feed every 15 days at half the recommended dose. A little often beats a lot at once.",
        priority=6,
    ),
    CareTip(
        id="fertilizer-overfeeding-signs",
        category="fertilizer",
        condition=_has_plants,
        icon="🚨",
        title="Too much fertilizer",
        message="White crust on the soil, scorched leaf edges or weak growth are signs of overfeeding. Water heavily to flush out the salts.",
        priority=7,
    ),
    CareTip(
        id="fertilizer-organic-options",
        category="fertilizer",
        condition=_has_plants,
        icon="♻️",
        title="Organic fertilizers",
        message="Worm castings, compost tea or banana peels are great organic options. They release nutrients slowly and improve soil structure.",
        priority=3,
    ),
    CareTip(
        id="fertilizer-winter-stop",
        category="fertilizer",
        condition=lambda ctx: ctx.season == SEASON_WINTER,
        icon="🚫",
        title="Don't fertilize in winter",
        message="Resting plants don't absorb nutrients. Winter feeding builds up salts in the soil and can burn the roots. Wait for spring.",
        priority=7,
    ),
    CareTip(
        id="fertilizer-succulents",
        category="fertilizer",
        condition=lambda ctx: has_plant_type(ctx, "suculenta") or has_plant_type(ctx, "cactus"),
        icon="🌵",
        title="Feeding succulents and cacti",
        message="Succulents and cacti need little food. Use a specific fertilizer diluted to 25%, only in spring and summer, at most once a month.",
        priority=4,
    ),
    CareTip(
        id="fertilizer-flowering",
        category="fertilizer",
        condition=lambda ctx: has_plant_type(ctx, "floral") and _in_season(ctx, SEASON_SPRING, SEASON_SUMMER),
        icon="🌷",
        title="Fertilizer for blooming",
        message="Flowering plants need more phosphorus and potassium. Look for a 10-30-20 style formula when the blooming season starts.",
        priority=5,
    ),
    CareTip(
        id="fertilizer-banana-peel",
        category="fertilizer",
        condition=lambda ctx: _has_plants(ctx, 2),
        icon="🍌",
        title="Banana peel tea",
        message="Soak banana peels in water for 48 hours and use it to water. It's rich in potassium; flowering and fruit plants love it.",
        priority=2,
    ),

    # --- Care, garden-wide ---
    CareTip(
        id="care-leggy-growth",
        category="care",
        condition=lambda ctx: _has_plants(ctx) and _in_season(ctx, SEASON_WINTER, SEASON_FALL),
        icon="🌿",
        title="Leggy growth",
        message="If your plants stretch with thin stems and sparse leaves, they need more light. Common in winter; move them to the brightest window.",
        priority=5,
    ),
    CareTip(
        id="care-repot-signs",
        category="care",
        condition=_has_plants,
        icon="🪴",
        title="Signs it needs repotting",
        message="Roots out the bottom, water draining straight through or stalled growth mean it needs a bigger pot.",
        priority=5,
    ),
    CareTip(
        id="care-bottom-leaves-normal",
        category="care",
        condition=_has_plants,
        icon="🍃",
        title="Dry lower leaves",
        message="The oldest (lowest) leaves drying up is normal for most plants; the plant reabsorbs their nutrients. Only worry if many go at once.",
        priority=3,
    ),
    CareTip(
        id="care-water-temperature",
        category="care",
        condition=lambda ctx: ctx.season == SEASON_WINTER,
        icon="🌡️",
        title="Water temperature",
        message="In winter, don't water with ice-cold tap water. Let it reach room temperature first so the roots aren't stressed.",
        priority=5,
    ),
    CareTip(
        id="care-soil-compaction",
        category="care",
        condition=_has_plants,
        icon="🪵",
        title="Compacted soil",
        message="If water runs down the sides without soaking the soil, it's compacted. Gently poke it with a stick and loosen the top layer.",
        priority=5,
    ),

    # --- General, garden-wide ---
    CareTip(
        id="general-consistent-routine",
        category="general",
        condition=lambda ctx: _has_plants(ctx, 3),
        icon="📋",
        title="Consistency is key",
        message="Plants prefer a steady routine over erratic care. Better to water a little late than to skip and then flood them.",
        priority=3,
    ),
    CareTip(
        id="general-terracotta-vs-plastic",
        category="general",
        condition=_has_plants,
        icon="🏺",
        title="Terracotta vs plastic pots",
        message="Terracotta breathes and dries faster (better for succulents). Plastic holds moisture (better for ferns and tropicals).",
        priority=2,
    ),
    CareTip(
        id="general-finger-test",
        category="general",
        condition=_has_plants,
        icon="👆",
        title="The finger test",
        message="Push a finger 2-3 cm into the soil. If it's dry, water; if it's moist, wait. The simplest way to know when to water.",
        priority=4,
    ),
    CareTip(
        id="general-patience",
        category="general",
        condition=_has_plants,
        icon="🐌",
        title="Patience with new plants",
        message="A new plant can take 2-4 weeks to settle in. If it drops a few leaves at first, don't panic. Give it time and steady care.",
        priority=3,
    ),
    CareTip(
        id="general-watch-pets",
        category="general",
        condition=_has_plants,
        icon="🐱",
        title="Plants and pets",
        message="Many common plants are toxic to dogs and cats. If you have pets, keep plants out of reach or choose safe varieties.",
        priority=4,
    ),
)

_TIPS_BY_ID: Dict[str, CareTip] = {tip.id: tip for tip in CARE_TIPS}


def get_tip(tip_id: str) -> Optional[CareTip]:
    return _TIPS_BY_ID.get(tip_id)
