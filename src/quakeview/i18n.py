"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "지진 데이터 시각화",
        "en": "Earthquake Data Visualization",
    },
    "subtitle": {
        "ko": "최근 한 달 USGS 지진 {shown}건 (좌표 유효)",
        "en": "USGS earthquakes from the past month ({shown} with valid coordinates)",
    },
    "subtitle_of_total": {
        "ko": " / 전체 {total}건",
        "en": " of {total} total",
    },
    "label_x_axis": {
        "ko": "X축",
        "en": "X-Axis",
    },
    "label_y_axis": {
        "ko": "Y축",
        "en": "Y-Axis",
    },
    "btn_reset_zoom": {
        "ko": "확대 초기화",
        "en": "Reset Zoom",
    },
    "downsample_banner": {
        "ko": "스마트 다운샘플링: {points}개 점이 지진 {represented}건을 표현",
        "en": "Smart Downsampling: {points} points representing {represented} earthquakes",
    },
    "downsample_detail": {
        "ko": "클러스터 {clusters}개 • 개별 점 {individual}개 • 클러스터를 클릭하면 확대",
        "en": "{clusters} clusters • {individual} individual points • Click clusters to zoom in",
    },
    "legend_magnitude": {
        "ko": "개별 점 (규모)",
        "en": "Individual Points (Magnitude)",
    },
    "legend_cluster": {
        "ko": "클러스터 (건수)",
        "en": "Clusters (Count)",
    },
    "table_title": {
        "ko": "지진 데이터 표",
        "en": "Earthquake Data Table",
    },
    "table_count": {
        "ko": "{count}건 표시",
        "en": "Showing {count} earthquakes",
    },
    "label_first_row": {
        "ko": "시작 행",
        "en": "First row",
    },
    "label_sort": {
        "ko": "정렬",
        "en": "Sort",
    },
    "label_select_row": {
        "ko": "행 선택",
        "en": "Select row",
    },
    "selected": {
        "ko": "선택: {place} (규모 {mag})",
        "en": "Selected: {place} (M {mag})",
    },
    "no_data": {
        "ko": "표시할 지진 데이터가 없습니다.",
        "en": "No earthquake data was found.",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found. Templates with
    {placeholders} are formatted by the caller.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
