# camvigil

This package holds the logic behind a multi-camera recording viewer: the
playback timeline, the segment index, gapless stitching, clip export and
paging in the live grid. It contains no GUI toolkit code. You can drive it from
any front end or test it by itself. It uses only the standard library.

## Modules

- `camvigil.timeline_model`: `TimelineModel.build(day_start_ns, day_end_ns, raw_segments)`
  does four things with raw recording spans:
  - clips them to the day window;
  - sorts them;
  - caps each span's end at the next span's start;
  - merges spans that touch or overlap.

  The results are in `spans` as `TimelineSpan` values. `fraction_for(t_ns)`
  gives a 0..1 position and `total_covered_ns()` gives the coverage.
- `camvigil.segment_index`: `SegmentIndex.build(segments, day_start_ns, day_end_ns)`
  turns `Segment` records into a playlist of `FileSeg`. Where two files
  overlap, the earlier one wins. Gaps longer than `gap_threshold_ns` (2 s by
  default) are recorded as `Gap`. The other calls:
  - `map_wall_clock(wall_ns)` returns `(index, offset)`, or `None` for a time
    in a gap.
  - `next_segment_index_after(wall_ns)` returns the index of the next segment.
  - `export_for_stitching()` returns `StitchingArrays`.
  - `debug_dump(tag)` logs the dump lines and returns them.
- `camvigil.stitching`: `StitchingPlayer` plays a list of `SegmentMeta` as one
  gapless virtual timeline.
  - It sends commands to an attached player object that has `open`, `play`,
    `pause`, `stop`, `seek_ns` and `set_rate` methods.
  - The player reports back through `on_player_eos()` and
    `on_player_position(ns)`.
  - Events go out through the optional callbacks `error_text`, `reached_end`,
    `wall_position_ns`, `segment_changed` and `state_changed`.
- `camvigil.timeline_view`: `TimelineView` holds the interaction state of the
  24-hour bar:
  - the playhead and the `bar_rect()` geometry (a `Rect`);
  - the trim selection, with handles hit-tested by `handle_rect_at`;
  - the drag kind (`DragKind`);
  - `hover_label` tooltips.

  You feed it pointer events through `press(x, y, now_ms)`,
  `move(x, y, now_ms)`, `release()` and `leave()`. While the playhead is
  dragged, seek requests go out at most once every 90 ms.
- `camvigil.trim`: `TrimPanel` holds the trim range, the duration label, the
  progress value and text, and the `Phase` (idle, clipping, clipped, saving,
  saved, error). Its helpers are `ns_to_clock`, `clock_to_ns` and
  `format_duration`.
- `camvigil.exporter`: `Exporter` works with a day's playlist and a selection.
  - `compute_parts()` computes the `ClipPart`s.
  - `cut_args` and `concat_args` build the encoder argument lists.
  - `estimate_bytes` estimates the output size.
  - `output_basename(today)` names the output file.
  - `prepare(today)` cuts and concatenates into a temp clip. It runs the
    encoder through a `runner(program, args) -> (exit_code, stderr)` callable
    that you supply. With no runner, any cut or concat fails.
  - `save_to_external(external_root, free_bytes)` copies the prepared clip
    into `<external_root>/CamVigilExports`, or into `ExportOptions.out_dir`,
    reporting progress as it goes.
  - Failures and cancellation (`cancel()`) raise `ExportError`.
  - `write_concat_list` writes a concat input list.
- `camvigil.controls`: `PlaybackControls` holds the group, camera and date
  selection and the state of the Go button.
  - `pick_date` and `set_available_dates` snap the date to the nearest day
    that has recordings (`nearest_available`).
  - `press_go()` returns the chosen camera and date.
- `camvigil.timeline_controller`: `TimelineController.on_go(camera_name, day)`
  resolves the camera id. It then asks a `list_segments(camera_id, "YYYY-MM-DD")`
  callable for that camera's segments. `on_segments_ready` builds the day's
  `TimelineModel` from the answer. `day_start_ns` and `day_end_ns` give local
  midnight in epoch nanoseconds.
- `camvigil.layout`: `LayoutManager` fills a `GridLayout` with exactly
  rows×cols widgets in row-major order. It raises `ValueError` on a bad size or
  count.
- `camvigil.groups`: provides `CameraGroup`, `build_groups`, `fallback_group`
  (the "All Cameras" group), `clamp_group_index` and `visible_order_for`.
- `camvigil.live_grid`: `CustomLiveView` pages through the custom layout, which
  shows one large camera and eight small ones on a 4×5 grid. It offers
  `set_groups`, `select_group`, `next_page`, `previous_page`, `page_info()`
  and `placements()`, which returns `Placement` values. The free functions are
  `custom_total_pages` and `custom_page_placements`.

## Example

```python
from camvigil.segment_index import Segment, SegmentIndex

day_end = 24 * 3600 * 10**9
index = SegmentIndex()
index.build(
    [Segment("a.mkv", 0, 60 * 10**9), Segment("b.mkv", 120 * 10**9, 180 * 10**9)],
    0,
    day_end,
)
print(index.total_covered_ns())           # 120000000000
print(index.map_wall_clock(30 * 10**9))   # (0, 30000000000)
print(index.gaps)                         # the 60 s gap and the tail of the day
```

## What it does not do

- It has no windows or widgets, and it does not decode or render video.
- It does not capture or record cameras.
- It has no database. Segment lists and camera groups come from callables and
  data that you pass in.
- It does not start the encoder itself. Cutting and joining clips goes through
  the runner you give `Exporter`.
- It does not measure free space on external media. You pass that figure to
  `save_to_external`.
- It has no command-line program.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```