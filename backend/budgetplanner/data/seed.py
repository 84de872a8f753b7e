"""Default pricing catalogs for residential and condo properties.

Tier prices are quoted for a 4000 sqft home. Condo pricing starts from the
residential catalog and overrides the categories that differ.
"""

from __future__ import annotations

from budgetplanner.models.catalog import Category, Extra, PricingCatalog, TierOffering
from budgetplanner.models.enums import PropertyType, Tier

RESIDENTIAL_CATEGORIES: list[Category] = [
    # --- Infrastructure ---
    Category(
        id="prewire",
        section="Infrastructure",
        name="Structured Wiring & Pre-Wire",
        icon="🔌",
        description="Low voltage wiring infrastructure for all technology systems",
        size_scale=1.0,
        tiers={
            Tier.GOOD: TierOffering(
                price=12000,
                label="Essential",
                tag="Good",
                features=[
                    "Dual CAT6 for TVs to main rooms, single CAT6 to others",
                    "Basic coax (RG6) to all TVs",
                    "Standard structured media panel",
                ],
                brands="Cat6, RG6 coax, 16-4, Leviton panel",
            ),
            Tier.STANDARD: TierOffering(
                price=22000,
                label="Standard",
                tag="Standard",
                features=[
                    "Dual Cat6 to all TVs",
                    "Camera pre-wire (front and rear basics)",
                    "Alarm pre-wire for all doors",
                ],
                brands="Cat6, Single mode fiber optic, 16/4 speaker wire",
            ),
            Tier.BETTER: TierOffering(
                price=35000,
                label="Comprehensive",
                tag="Better",
                features=[
                    "Dual Cat6A to all TVs",
                    "Outside perimeter camera pre-wire",
                    "Lutron shade pre-wire to main living area windows",
                ],
                brands="Cat6A, Single mode fiber optic, Lutron shade wire",
            ),
            Tier.BEST: TierOffering(
                price=44000,
                label="Premium",
                tag="Best",
                features=[
                    "Dual Cat6A to all TVs plus CAT7 to main rooms",
                    "Pre-wire for extensive audio zones + single Atmos room",
                    "Gate/intercom wiring and guest house connectivity",
                ],
                brands="Cat6A, Single mode fiber optic, Lutron shade wire",
            ),
        },
    ),
    Category(
        id="networking",
        section="Infrastructure",
        name="Whole-Home WiFi & Networking",
        icon="📡",
        description="Enterprise-grade WiFi coverage and network infrastructure",
        size_scale=0.8,
        tiers={
            Tier.GOOD: TierOffering(
                price=5700,
                label="Reliable, Basic Coverage",
                tag="Good",
                features=["WiFi 7 access points for full interior coverage and lanai"],
                brands="UniFi LR, USW-Pro-24-PoE",
            ),
            Tier.BETTER: TierOffering(
                price=9700,
                label="Full Coverage",
                tag="Better",
                features=["WiFi 7 access points for interior, lanai, and garage(s)"],
                brands="UniFi Pro, Unifi UPS, UDM Pro",
            ),
            Tier.BEST: TierOffering(
                price=15000,
                label="Enterprise Class",
                tag="Best",
                features=["High capacity WiFi 7 access points with 10G uplinks"],
                brands="UniFi Enterprise, Unifi UPS, UDM Pro",
            ),
        },
    ),
    # --- Security ---
    Category(
        id="surveillance",
        section="Security",
        name="Surveillance & Security Cameras",
        icon="📹",
        description="IP camera system with recording and smart detection",
        size_scale=0.7,
        base_tier_no_scale=True,
        tiers={
            Tier.GOOD: TierOffering(price=5300, label="Key Coverage", tag="Good", brands="UniFi"),
            Tier.BETTER: TierOffering(
                price=10700, label="Enhanced Coverage", tag="Better", brands="UniFi Pro Series"
            ),
            Tier.BEST: TierOffering(
                price=19300,
                label="Full Perimeter",
                tag="Best",
                brands="UniFi Pro Series, Cloud Key",
            ),
        },
    ),
    # --- Audio ---
    Category(
        id="audio",
        section="Audio",
        name="Multi-Room Audio",
        icon="🎵",
        description="Whole-home distributed audio for indoor and outdoor zones",
        size_scale=0.7,
        tiers={
            Tier.GOOD: TierOffering(price=9600, label="Basic", tag="Good"),
            Tier.STANDARD: TierOffering(price=18000, label="Standard", tag="Standard"),
            Tier.BETTER: TierOffering(price=27000, label="Entertainment Focused", tag="Better"),
            Tier.BEST: TierOffering(price=32000, label="Music Lover", tag="Best"),
        },
    ),
    Category(
        id="invisible-speakers",
        section="Audio",
        name="Invisible Speakers",
        icon="🔇",
        description="Speakers completely hidden behind drywall",
        size_scale=0.5,
        tiers={
            Tier.GOOD: TierOffering(price=7500, size_scale=0.2, label="Key Coverage", tag="Good"),
            Tier.STANDARD: TierOffering(
                price=10500, size_scale=0.3, label="Main Living", tag="Standard"
            ),
            Tier.BETTER: TierOffering(
                price=28500, size_scale=0.5, label="Whole Home", tag="Better"
            ),
            Tier.BEST: TierOffering(
                price=38500, size_scale=0.6, label="Whole Home, Premium", tag="Best"
            ),
        },
    ),
    Category(
        id="surround",
        section="Audio",
        name="Surround Sound",
        icon="🔊",
        description="Immersive surround audio for the main TV",
        size_scale=0.0,
        tiers={
            Tier.GOOD: TierOffering(price=5300, label="Sonos Surround", tag="Good"),
            Tier.BETTER: TierOffering(price=9900, label="Custom Surround", tag="Better"),
            Tier.BEST: TierOffering(price=15900, label="Invisible Surround", tag="Best"),
        },
    ),
    Category(
        id="theater",
        section="Audio",
        name="Home Theater / Media Room",
        icon="🎬",
        description="Dedicated entertainment room, display not included",
        size_scale=0.0,
        tiers={
            Tier.GOOD: TierOffering(price=26000, label="Media Room", tag="Good"),
            Tier.STANDARD: TierOffering(price=62000, label="Theater Quality", tag="Standard"),
            Tier.BETTER: TierOffering(price=129000, label="Reference Theater", tag="Better"),
            Tier.BEST: TierOffering(price=187000, label="Full Theater Experience", tag="Best"),
        },
    ),
    # --- Video ---
    Category(
        id="videodist",
        section="Video",
        name="TV Mounting & Video Distribution",
        icon="📺",
        description="TV installations, mounting, and source distribution",
        size_scale=0.7,
        tiers={
            Tier.GOOD: TierOffering(price=5500, label="Local Sources, Basic", tag="Good"),
            Tier.BETTER: TierOffering(price=9200, label="Local Sources, Preferred", tag="Better"),
            Tier.BEST: TierOffering(
                price=29000, size_scale=0.5, label="Video Over IP Distribution", tag="Best"
            ),
        },
    ),
    # --- Control & Automation ---
    Category(
        id="control",
        section="Control & Automation",
        name="Control & Automation System",
        icon="🎛️",
        description="Unified control of all systems from touchscreens, remotes, and app",
        size_scale=0.6,
        tiers={
            Tier.GOOD: TierOffering(price=9500, label="Automation Basic", tag="Good"),
            Tier.BETTER: TierOffering(price=16000, label="Automation Enhanced", tag="Better"),
            Tier.BEST: TierOffering(price=29500, label="Full Automation", tag="Best"),
        },
    ),
    Category(
        id="touchscreen",
        section="Control & Automation",
        name="Touchscreens",
        icon="📱",
        description="Dedicated in-wall hubs for instant home control",
        size_scale=0.0,
        tiers={
            Tier.GOOD: TierOffering(price=2200, label="Touchscreen Essential", tag="Good"),
            Tier.STANDARD: TierOffering(price=4800, label="Touchscreen Basic", tag="Standard"),
            Tier.BETTER: TierOffering(price=7200, label="Touchscreen Standard", tag="Better"),
            Tier.BEST: TierOffering(
                price=23200, size_scale=0.5, label="Touchscreen Full", tag="Best"
            ),
        },
    ),
    # --- Lighting & Shades ---
    Category(
        id="lighting",
        section="Lighting & Shades",
        name="Wireless Lighting Control",
        icon="💡",
        description="Smart lighting with scene control, dimming, and scheduling",
        size_scale=1.0,
        tiers={
            Tier.GOOD: TierOffering(price=5500, size_scale=0.4, label="Wireless Basic", tag="Good"),
            Tier.BETTER: TierOffering(
                price=15000, size_scale=0.4, label="Wireless Partial", tag="Better"
            ),
            Tier.BEST: TierOffering(
                price=32000, size_scale=0.9, label="Wireless Full Home", tag="Best"
            ),
        },
    ),
    Category(
        id="lighting-centralized",
        section="Lighting & Shades",
        name="Centralized / Hybrid Lighting Control",
        icon="🏛️",
        description="Hardwired smart lighting control for maximum reliability",
        size_scale=1.0,
        tiers={
            Tier.GOOD: TierOffering(
                price=30000, size_scale=0.4, label="Centralized Partial", tag="Good"
            ),
            Tier.BETTER: TierOffering(
                price=47000, size_scale=0.9, label="Hybrid Full Home", tag="Better"
            ),
            Tier.BEST: TierOffering(
                price=60000, size_scale=0.9, label="Centralized Full Home", tag="Best"
            ),
        },
    ),
    Category(
        id="lighting-designer",
        section="Lighting & Shades",
        name="Designer Lighting Keypads",
        icon="✨",
        description="Premium designer keypads with custom finishes and engraving",
        size_scale=0.0,
        tiers={
            Tier.GOOD: TierOffering(price=6000, size_scale=0.4, label="Partial Home", tag="Good"),
            Tier.BETTER: TierOffering(price=10000, size_scale=1, label="Full Home", tag="Better"),
            Tier.BEST: TierOffering(
                price=20000, size_scale=1, label="Full Home Bespoke", tag="Best"
            ),
        },
    ),
    Category(
        id="shades",
        section="Lighting & Shades",
        name="Motorized Shades",
        icon="🪟",
        description="Automated window treatments with scene integration",
        size_scale=0.9,
        tiers={
            Tier.GOOD: TierOffering(price=35000, size_scale=0.4, label="Key Windows", tag="Good"),
            Tier.BETTER: TierOffering(
                price=70000, size_scale=0.8, label="Standard Windows", tag="Better"
            ),
            Tier.BEST: TierOffering(price=100000, label="Most/All Windows", tag="Best"),
        },
    ),
    # --- Outdoor & Security ---
    Category(
        id="outdoor",
        section="Audio",
        name="Yard/Pool Audio",
        icon="🌴",
        description="Weather-rated outdoor audio and speakers",
        size_scale=0.6,
        tiers={
            Tier.GOOD: TierOffering(price=6000, size_scale=0.2, label="Basic", tag="Good"),
            Tier.BETTER: TierOffering(price=17000, size_scale=0.2, label="Preferred", tag="Better"),
            Tier.BEST: TierOffering(price=24000, size_scale=0.4, label="Premium", tag="Best"),
        },
    ),
    Category(
        id="security",
        section="Security",
        name="Security & Alarm System",
        icon="🛡️",
        description="Intrusion detection, sensors, and 24/7 monitoring",
        size_scale=0.6,
        tiers={
            Tier.GOOD: TierOffering(
                price=3500, size_scale=0.5, label="Essential Protection", tag="Good"
            ),
            Tier.BETTER: TierOffering(
                price=7500, size_scale=0.8, label="Standard Security", tag="Better"
            ),
            Tier.BEST: TierOffering(
                price=9500, size_scale=0.8, label="Full Integration", tag="Best"
            ),
        },
    ),
    Category(
        id="intercom",
        section="Security",
        name="Intercom, Doorbell & Access Control",
        icon="🚪",
        description="Video doorbell, gate intercom, and entry access management",
        size_scale=0.2,
        tiers={
            Tier.GOOD: TierOffering(price=2000, label="Video Doorbell", tag="Good"),
            Tier.BETTER: TierOffering(price=7500, label="Video Doorbell + Gate", tag="Better"),
            Tier.BEST: TierOffering(
                price=10500, label="Premium Video Doorbell and Gate", tag="Best"
            ),
        },
    ),
    # --- Video walls ---
    Category(
        id="videowall-interior",
        section="Video",
        name="Video Wall Interior",
        icon="🖥️",
        description="Seamless LED video wall for a living or entertainment space",
        size_scale=0.0,
        tiers={
            Tier.GOOD: TierOffering(price=50000, tag="Good"),
            Tier.STANDARD: TierOffering(price=69000, tag="Standard"),
            Tier.BETTER: TierOffering(price=89000, tag="Better"),
            Tier.BEST: TierOffering(price=119000, tag="Best"),
        },
    ),
    Category(
        id="videowall-exterior",
        section="Video",
        name="Video Wall Exterior",
        icon="🌅",
        description="Weather-rated LED video wall for outdoor living",
        size_scale=0.0,
        tiers={
            Tier.GOOD: TierOffering(price=83000, tag="Good"),
            Tier.STANDARD: TierOffering(price=109000, tag="Standard"),
            Tier.BETTER: TierOffering(price=149000, tag="Better"),
            Tier.BEST: TierOffering(
                price=179000, tag="Best", brands="Opal Screens Water Series"
            ),
        },
    ),
]

RESIDENTIAL_EXTRAS: list[Extra] = [
    Extra(
        id="poolAlarm",
        name="Pool Alarm & Child Safety",
        note="Required by FL building code",
        price=2200,
        size_scale=1,
    ),
    Extra(
        id="fireDet",
        name="Low Voltage Fire Detection",
        note="Monitored smoke/heat/CO",
        price=3800,
        size_scale=0.3,
    ),
    Extra(
        id="leakDet",
        name="Leak Detection System",
        note="Water heater, laundry, sinks",
        price=3500,
        size_scale=0.2,
    ),
]

# Categories that do not apply to a condo unit.
_CONDO_EXCLUDED = {"surveillance", "outdoor", "security", "intercom"}


def _condo_tiers(prices: dict[Tier, float], base: Category) -> dict[Tier, TierOffering]:
    tiers = {}
    for tier, price in prices.items():
        offering = base.tiers.get(tier) or TierOffering(price=price, tag=tier.value.title())
        tiers[tier] = offering.model_copy(update={"price": price})
    return tiers


def _build_condo_categories() -> list[Category]:
    tier_overrides: dict[str, dict[Tier, float]] = {
        "prewire": {
            Tier.GOOD: 14000,
            Tier.STANDARD: 24000,
            Tier.BETTER: 35000,
            Tier.BEST: 44000,
        },
        "networking": {Tier.GOOD: 5700, Tier.BETTER: 9700, Tier.BEST: 15000},
        "audio": {
            Tier.GOOD: 9600,
            Tier.STANDARD: 18000,
            Tier.BETTER: 27000,
            Tier.BEST: 32000,
        },
        "control": {Tier.GOOD: 9500, Tier.BETTER: 16000, Tier.BEST: 29500},
    }
    field_overrides: dict[str, dict[str, str]] = {
        "videowall-exterior": {
            "name": "Video Wall Balcony/Terrace",
            "description": "Weather-rated LED video wall for balcony or covered terrace",
        },
    }

    categories: list[Category] = []
    for cat in RESIDENTIAL_CATEGORIES:
        if cat.id in _CONDO_EXCLUDED:
            continue
        update: dict[str, object] = dict(field_overrides.get(cat.id, {}))
        if cat.id in tier_overrides:
            update["tiers"] = _condo_tiers(tier_overrides[cat.id], cat)
        categories.append(cat.model_copy(update=update, deep=True))
    return categories


CONDO_CATEGORIES: list[Category] = _build_condo_categories()
CONDO_EXTRAS: list[Extra] = []

SEED_CATALOGS: dict[PropertyType, PricingCatalog] = {
    PropertyType.RESIDENTIAL: PricingCatalog(
        property_type=PropertyType.RESIDENTIAL,
        categories=RESIDENTIAL_CATEGORIES,
        extras=RESIDENTIAL_EXTRAS,
    ),
    PropertyType.CONDO: PricingCatalog(
        property_type=PropertyType.CONDO,
        categories=CONDO_CATEGORIES,
        extras=CONDO_EXTRAS,
    ),
}
