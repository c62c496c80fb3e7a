"""Model-to-profile matching logic."""

from __future__ import annotations

from nodectl.core.model import FeatureProfile


def _model_number(model: int) -> int:
    return model // 10000


def _exact_match(model: int, profile: FeatureProfile) -> bool:
    return model in profile.match.models


def _prefix_match(model: int, profile: FeatureProfile) -> bool:
    return _model_number(model) in profile.match.model_prefix


def match_score(model: int, profile: FeatureProfile) -> int:
    if _exact_match(model, profile):
        return 2
    if _prefix_match(model, profile):
        return 1
    return 0


def best_profile_for_model(model: int, profiles: dict[str, FeatureProfile]) -> FeatureProfile | None:
    best: FeatureProfile | None = None
    best_score = 0
    for profile in profiles.values():
        score = match_score(model, profile)
        if score > best_score:
            best = profile
            best_score = score
    return best
