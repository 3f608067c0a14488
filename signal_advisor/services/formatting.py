from signal_advisor.core.models import SignalRecommendation


def format_recommendation(recommendation: SignalRecommendation) -> str:
    return "Lane {lane} ({count} vehicles, {level} congestion)".format(
        lane=recommendation.lane_number,
        count=recommendation.vehicle_count,
        level=recommendation.congestion_level.value,
    )
