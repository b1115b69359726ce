import json
from typing import Any

from ..errors import ValidationError
from ..profile import EncoderSettings, StreamService
from ..scene import Scene, SceneCollection, SceneItem, Source, SourceKind

# 音声ソースのみ全トラック (1-6) へ出力する
_ALL_MIXERS = 0xFF

_AUDIO_SOURCE_KINDS = {
    SourceKind.AUDIO_OUTPUT_CAPTURE,
    SourceKind.AUDIO_INPUT_CAPTURE,
}

OBS_ALIGN_CENTER = 0
OBS_ALIGN_TOP_LEFT = 5
OBS_BOUNDS_NONE = 0
OBS_BOUNDS_SCALE_INNER = 2


def dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


def render_stream_encoder_json(encoder: EncoderSettings) -> str:
    return dump_json(
        {
            "rate_control": encoder.rate_control,
            "bitrate": encoder.bitrate_kbps,
            "keyint_sec": encoder.keyframe_interval_sec,
            "preset": encoder.preset,
            "profile": encoder.profile,
            "lookahead": encoder.lookahead,
            "psycho_aq": encoder.psycho_visual_tuning,
            "bf": encoder.b_frames,
        }
    )


def render_service_json(service: StreamService) -> str:
    return dump_json(
        {
            "type": service.service_type,
            "settings": {
                "service": service.service_name,
                "server": service.server,
                "key": service.stream_key.get_secret_value(),
                "bwtest": False,
            },
        }
    )


def _render_source(source: Source) -> dict[str, Any]:
    obs_source_id = source.kind.obs_source_id

    return {
        "name": source.name,
        "uuid": source.id,
        "id": obs_source_id,
        "versioned_id": obs_source_id,
        "settings": dict(source.settings),
        "mixers": _ALL_MIXERS if source.kind in _AUDIO_SOURCE_KINDS else 0,
        "sync": 0,
        "flags": 0,
        "volume": float(source.volume),
        "balance": 0.5,
        "enabled": True,
        "muted": source.muted,
        "monitoring_type": 0,
        "private_settings": {},
    }


def _render_scene_item(
    item: SceneItem,
    item_id: int,
    scene_collection: SceneCollection,
) -> dict[str, Any]:
    try:
        source = scene_collection.get_source(item.source_id)
    except KeyError:
        raise ValidationError(
            f"scene item references unknown source id: {item.source_id}"
        ) from None

    transform = item.transform
    bounds = transform.bounds

    return {
        "name": source.name,
        "source_uuid": source.id,
        "visible": item.visible,
        "locked": item.locked,
        "rot": 0.0,
        "pos": {"x": transform.position.x, "y": transform.position.y},
        "scale": {"x": transform.scale.x, "y": transform.scale.y},
        "align": OBS_ALIGN_TOP_LEFT,
        "bounds_type": (
            OBS_BOUNDS_SCALE_INNER if bounds is not None else OBS_BOUNDS_NONE
        ),
        "bounds_align": OBS_ALIGN_CENTER,
        "bounds": {
            "x": bounds.x if bounds is not None else 0.0,
            "y": bounds.y if bounds is not None else 0.0,
        },
        "crop_left": transform.crop.left,
        "crop_top": transform.crop.top,
        "crop_right": transform.crop.right,
        "crop_bottom": transform.crop.bottom,
        "id": item_id,
        "group_item_backup": False,
    }


def _render_scene(scene: Scene, scene_collection: SceneCollection) -> dict[str, Any]:
    items = [
        _render_scene_item(
            item=item,
            item_id=item_index + 1,
            scene_collection=scene_collection,
        )
        for item_index, item in enumerate(scene.items)
    ]

    return {
        "name": scene.name,
        "uuid": scene.id,
        "id": "scene",
        "versioned_id": "scene",
        "settings": {
            "id_counter": len(items),
            "custom_size": False,
            "items": items,
        },
        "mixers": 0,
        "sync": 0,
        "flags": 0,
        "volume": 1.0,
        "balance": 0.5,
        "enabled": True,
        "muted": False,
        "monitoring_type": 0,
        "private_settings": {},
    }


def render_scene_collection_json(scene_collection: SceneCollection) -> str:
    sources = [_render_source(source) for source in scene_collection.sources]
    scenes = [
        _render_scene(scene=scene, scene_collection=scene_collection)
        for scene in scene_collection.scenes
    ]

    return dump_json(
        {
            "current_scene": scene_collection.current_scene,
            "current_program_scene": scene_collection.current_scene,
            "scene_order": [{"name": scene.name} for scene in scene_collection.scenes],
            "name": scene_collection.name,
            "sources": sources + scenes,
            "groups": [],
            "quick_transitions": [],
            "transitions": [],
            "saved_projectors": [],
            "current_transition": scene_collection.transition,
            "transition_duration": scene_collection.transition_duration_ms,
            "preview_locked": False,
            "scaling_enabled": False,
            "modules": {},
        }
    )
