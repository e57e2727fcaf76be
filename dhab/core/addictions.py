"""
Built-in catalog of habits a user can track.

Categories and items are shown in this order in the setup view.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class AddictionCategory:
    """A named group of trackable habits."""
    name: str
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "items": list(self.items)}


ADDICTION_CATEGORIES: List[AddictionCategory] = [
    AddictionCategory("Benzodiazepines", [
        "Alprazolam",
        "Barbiturates",
        "Buprenorphine",
        "Codeine",
        "Fentanyl",
        "Heroin",
        "Kratom",
        "Lean (Codeine Mixture)",
        "Methadone",
        "Opiates",
        "Suboxone",
        "Xanax",
    ]),
    AddictionCategory("Alcoholic Drinks", [
        "Alcohol",
        "Beer",
        "Binge Drinking",
        "Booze",
        "Bourbon",
        "Gin",
        "Rum",
        "Tequila",
        "Vodka",
        "Whiskey",
        "Wine",
    ]),
    AddictionCategory("Nicotine and Tobacco", [
        "Chewing Tobacco",
        "Cigarettes",
        "Nicotine",
        "Snus",
        "Tobacco",
        "Vaping",
        "Zyn",
    ]),
    AddictionCategory("Cannabis Products", [
        "Cannabis",
        "Cannabis (Synthetic)",
        "Marijuana",
        "Marijuana (Synthetic)",
        "Vaping (THC)",
    ]),
    AddictionCategory("Stimulants", [
        "3-MMC",
        "4-MMC",
        "Adderall",
        "Alpha-PVP (Flakka)",
        "Amphetamines",
        "Bath Salts",
        "Cocaine",
        "Crack Cocaine",
        "Crystal Meth",
        "Mephedrone",
        "Methamphetamine",
        "Methcathinone (CAT)",
        "Methylphenidate",
        "Mixed Amphetamine Salts",
        "Ritalin",
        "Synthetic Cathinones",
    ]),
    AddictionCategory("Other Drugs", [
        "Antidepressants",
        "Benadryl",
        "Dextromethorphan (DXM)",
        "Diphenhydramine",
        "Ecstasy",
        "Gamma-Hydroxybutyrate (GHB)",
        "Inhalants",
        "Ketamine",
        "Lisdexamfetamine",
        "LSD",
        "Lyrica",
        "Mescaline",
        "Muscle Relaxants",
        "Nasal Spray",
        "Nitrous Oxide",
        "Pregabalin",
        "Salvia",
        "Sleeping Aids",
        "Solvents",
        "Tramadol",
    ]),
    AddictionCategory("Food and Caffeine", [
        "Bread",
        "Caffeine",
        "Carbohydrates",
        "Cookies",
        "Dairy Products",
        "Energy Drinks",
        "Fast Food",
        "Gluten",
        "Junk Food",
        "Meat & Dairy",
        "Soft Drinks",
        "Sugar",
        "Sweets",
    ]),
    AddictionCategory("Eating Disorders", [
        "Binge Eating",
        "Binging and Purging",
        "Chewing and Spitting",
        "Eating Disorder",
        "Eating Disorder (Under Eating)",
        "Food Restricting",
        "Laxatives",
        "Purging",
    ]),
    AddictionCategory("Sexual Behaviours", [
        "Chemsex",
        "Masturbation",
        "Pornography",
        "Sex",
    ]),
    AddictionCategory("Body Focused Behaviours", [
        "Cheek Biting",
        "Hair Pulling",
        "Knuckle Cracking",
        "Lip Biting",
        "Nail Biting",
        "Pica (Non-food Eating)",
        "Self-harm",
        "Skin Picking",
    ]),
    AddictionCategory("Impulsive Behaviours", [
        "Compulsive Spending",
        "Excessive Exercising",
        "Gambling",
        "Online Shopping",
        "Shoplifting",
        "Stealing",
    ]),
    AddictionCategory("Social Behaviours", [
        "Anger",
        "Attention Seeking",
        "Bad Language (Swearing)",
        "Codependency",
        "Gossiping",
        "Lying",
        "Stalking",
        "Toxic Relationships",
    ]),
    AddictionCategory("Technology", [
        "Chatbots (AI)",
        "Dating Apps",
        "Doomscrolling",
        "Instagram",
        "Internet",
        "Online Videos",
        "Short Form Videos",
        "Social Media",
        "TikTok",
        "Video Games",
        "Virtual Reality",
    ]),
]


def get_all_addictions() -> List[str]:
    """Get all addictions as a flat list, in catalog order."""
    return [item for category in ADDICTION_CATEGORIES for item in category.items]


def search_addictions(query: str) -> List[str]:
    """Case-insensitive substring search over all addictions."""
    needle = query.lower()
    return [item for item in get_all_addictions() if needle in item.lower()]


def filter_categories(query: str) -> List[AddictionCategory]:
    """
    Narrow the catalog to items matching a query.

    Categories with no matching items are dropped. An empty query
    returns the full catalog.
    """
    if not query:
        return list(ADDICTION_CATEGORIES)

    needle = query.lower()
    filtered = []
    for category in ADDICTION_CATEGORIES:
        items = [item for item in category.items if needle in item.lower()]
        if items:
            filtered.append(AddictionCategory(category.name, items))
    return filtered
