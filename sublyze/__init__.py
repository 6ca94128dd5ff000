"""Sublyze: video transcription with synchronized, editable transcripts.

WHY: An uploaded video is only useful to an editor once its speech is
available as text that can be navigated, corrected, searched, translated,
and exported. This package drives an upload through an external ASR
service and turns the returned plain text into an ordered sequence of
timestamped, mutable segments.

HOW: Four stages: intake (validate and stage the upload), recognize (ASR
client), synchronize (segmenter + timestamp estimator), and present (the
transcript session with edit/search/export). Translation runs beside the
session on a text snapshot.

RULES:
- Provider calls go through sublyze.api only
- The segmentation engine is pure; timestamps derive from (duration, count, index)
- A staged upload is always released after its ASR attempt
- All failures are SublyzeError subclasses with a stable HTTP status
"""

__version__ = "0.1.0"
