import json, os
from typology_assist.models import ScenarioMetadata
from typology_assist.narrative import build_full_card
from typology_assist.rules import RuleEngine

BASE = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
catalog_path = os.path.join(BASE, "typologies", "typologies.yaml")
engine = RuleEngine.from_path(catalog_path)

meta = ScenarioMetadata(
    country="IN",
    domain="psp",
    product="wallet",
    customerType="individual",
    amountBand="high",
    volumeBand="high",
    crossBorder="Yes",
)
scenario = "Large amount moved across cross border wallets using multiple banks; funds immediately withdrawn."

for cand in engine.rank(meta, scenario):
    print("SCORE:", cand.score, cand.rule.name)
result = engine.analyse(meta, scenario)
print("RESULT:", json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
print(build_full_card(result))
