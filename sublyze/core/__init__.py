"""Core transcript modules: data model, intake, segmentation, timing, session.

WHY: Everything between "an upload arrived" and "the user exports an
edited transcript" that does not talk to a provider lives here. These
modules are pure or local-disk only, so they can be tested without a
network.

HOW: ir.py defines the dataclasses, intake.py stages uploads,
segmenter.py and timing.py turn text plus a duration into timestamped
segments, session.py makes them editable, searchable, and exportable.
progress.py and inflight.py support the orchestration in pipeline.py.

RULES:
- No provider HTTP calls in this package
- Timestamps are estimates derived from (duration, count, index) only
"""
