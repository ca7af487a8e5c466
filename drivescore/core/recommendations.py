"""Advisory strings for the driver, in the report's locale.

The checks run in a fixed order so the same input always yields the same
list.
"""

from __future__ import annotations

from drivescore.core.models import DrivingBehaviorAnalysis, VehicleWearEstimate, WearLevel

DEFAULT_LOCALE = "lv"

MESSAGES: dict[str, dict[str, str]] = {
    "lv": {
        "harsh_braking": "Samaziniet stingru bremzēšanu, uzturot drošu distanci un paredzot satiksmi",
        "harsh_acceleration": "Praktizējiet pakāpenisku paātrinājumu, lai uzlabotu degvielas efektivitāti un samazinātu nolietojumu",
        "speeding": "Ievērojiet ātruma ierobežojumus, lai samazinātu nelaimes gadījumu risku un apdrošināšanas izmaksas",
        "over_revving": "Pārslēdziet pārnesumus agrāk, lai samazinātu motora slodzi un uzlabotu ilgmūžību",
        "excellent": "Izcila braukšana! Jūs varētu kvalificēties samazinātām apdrošināšanas prēmijām",
        "defensive_course": "Apsveriet iespēju apmeklēt aizsardzības braukšanas kursus, lai uzlabotu drošību un samazinātu izmaksas",
        "brake_inspection": "Ieplānojiet bremžu pārbaudi - braukšanas paradumi norāda uz paaugstinātu nolietojumu",
    },
    "en": {
        "harsh_braking": "Reduce harsh braking by keeping a safe distance and anticipating traffic",
        "harsh_acceleration": "Accelerate gradually to improve fuel efficiency and reduce wear",
        "speeding": "Respect speed limits to lower accident risk and insurance costs",
        "over_revving": "Shift up earlier to reduce engine load and extend engine life",
        "excellent": "Excellent driving! You may qualify for reduced insurance premiums",
        "defensive_course": "Consider a defensive driving course to improve safety and reduce costs",
        "brake_inspection": "Schedule a brake inspection - driving habits indicate increased wear",
    },
}


def resolve_locale(locale: str | None) -> str:
    if locale and locale.lower() in MESSAGES:
        return locale.lower()
    return DEFAULT_LOCALE


def generate_recommendations(
    behavior: DrivingBehaviorAnalysis,
    score: float,
    wear: VehicleWearEstimate,
    locale: str = DEFAULT_LOCALE,
) -> list[str]:
    text = MESSAGES[resolve_locale(locale)]
    out = []

    if len(behavior.harsh_braking_events) > 10:
        out.append(text["harsh_braking"])
    if len(behavior.harsh_acceleration_events) > 15:
        out.append(text["harsh_acceleration"])
    if len(behavior.speeding_events) > 5:
        out.append(text["speeding"])
    if len(behavior.over_revving_events) > 20:
        out.append(text["over_revving"])

    if score >= 90:
        out.append(text["excellent"])
    elif score < 70:
        out.append(text["defensive_course"])

    if wear.brake_wear_level > WearLevel.Moderate:
        out.append(text["brake_inspection"])

    return out
