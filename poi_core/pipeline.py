"""POI classification pipeline.

Wires the reader, prefilter, geometry, classifier and record builder
together for one OSM file:

    reader -> prefilter -> candidate check -> classify -> locate -> record

Elements are independent, so classification can be spread over worker
processes; records come back in input order either way.
"""
import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence

from poi_core.classification.classifier import Classifier
from poi_core.classification.record_builder import build_record
from poi_core.config import ClassifierConfig
from poi_core.filters.import_filter import ImportFilter
from poi_core.geometry import ElementGeometry
from poi_core.models.elements import OSMElement
from poi_core.models.records import ClassifiedRecord
from poi_core.models.statistics import ClassificationStats
from poi_core.parsing.osm_parser import OSMParser
from poi_core.rules.index import RuleIndex
from poi_core.rules.loader import load_rule_index

logger = logging.getLogger(__name__)

# Elements per batch handed to a worker process
DEFAULT_CHUNK_SIZE = 5000

# Set once per worker process by _init_worker
_worker_classifier: Optional[Classifier] = None


def _init_worker(classifier: Classifier) -> None:
    global _worker_classifier
    _worker_classifier = classifier


def _classify_chunk(tag_sets: Sequence[Mapping[str, str]]) -> List[Optional[str]]:
    return [_worker_classifier.classify(tags) for tags in tag_sets]


def _chunks(items: Iterable[Any], size: int) -> Iterator[List[Any]]:
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def _classifier_pool(classifier: Classifier, workers: int) -> ProcessPoolExecutor:
    """Process pool whose workers each hold one copy of classifier."""
    return ProcessPoolExecutor(max_workers=workers, initializer=_init_worker,
                               initargs=(classifier,))


def _map_chunks(executor: ProcessPoolExecutor,
                tag_sets: Iterable[Mapping[str, str]],
                chunk_size: int) -> List[Optional[str]]:
    futures = [executor.submit(_classify_chunk, chunk)
               for chunk in _chunks(tag_sets, chunk_size)]
    results: List[Optional[str]] = []
    for future in futures:
        results.extend(future.result())
    return results


def classify_elements(tag_sets: Iterable[Mapping[str, str]],
                      classifier: Classifier,
                      workers: int = 1,
                      chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[Optional[str]]:
    """Classify many tag mappings, optionally across worker processes.

    Args:
        tag_sets: Tag mappings to classify
        classifier: Classifier to apply (copied once into each worker)
        workers: Number of processes; 1 runs in the calling process
        chunk_size: Tag mappings per worker task

    Returns:
        Class names (or None) in the same order as tag_sets
    """
    if workers <= 1:
        return [classifier.classify(tags) for tags in tag_sets]

    with _classifier_pool(classifier, workers) as executor:
        return _map_chunks(executor, tag_sets, chunk_size)


@dataclass
class PipelineResult:
    """Records produced from one source plus the run statistics."""
    records: List[ClassifiedRecord] = field(default_factory=list)
    stats: ClassificationStats = field(default_factory=ClassificationStats)
    source: Optional[str] = None

    def build_metadata(self, **extras) -> dict:
        """Common metadata block for exporters."""
        return {
            'source': self.source,
            **self.stats.to_dict(),
            **extras
        }


class POIPipeline:
    """Classify the elements of OSM files into POI records.

    Args:
        index: Compiled rule index; loaded from config.rules_path (or the
            bundled table) when omitted
        config: Pipeline options
    """

    def __init__(self, index: Optional[RuleIndex] = None,
                 config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()
        self.index = index if index is not None else load_rule_index(self.config.rules_path)
        self.classifier = Classifier(self.index, self.config.fallback_keys)
        self.import_filter = ImportFilter(self.config.import_filter_keys)

    def _candidates(self, elements: Iterable[OSMElement],
                    geometry: ElementGeometry,
                    stats: ClassificationStats) -> Iterator[OSMElement]:
        for element in elements:
            stats.count_element(element.kind)
            if self.config.prefilter and not self.import_filter.accepts(element):
                stats.prefiltered += 1
                continue
            if not geometry.is_candidate(element):
                stats.unsupported += 1
                continue
            yield element

    def _finish(self, element: OSMElement, class_name: Optional[str],
                geometry: ElementGeometry,
                stats: ClassificationStats) -> Optional[ClassifiedRecord]:
        if class_name is None:
            if 'name' not in element.tags:
                stats.unnamed += 1
            else:
                stats.unclassified += 1
            return None

        point = geometry.locate(element)
        if point is None:
            stats.missing_geometry += 1
            logger.debug("No geometry for %s/%s", element.kind, element.id)
            return None

        stats.count_class(class_name)
        return build_record(element, class_name, point)

    def process_elements(self, elements: Iterable[OSMElement],
                         geometry: ElementGeometry,
                         stats: Optional[ClassificationStats] = None
                         ) -> Iterator[ClassifiedRecord]:
        """Yield records for the elements that classify and can be located.

        Args:
            elements: Elements in source order
            geometry: Locator holding the node coordinate cache
            stats: Counters to update (a fresh instance if omitted)
        """
        stats = stats if stats is not None else ClassificationStats()
        candidates = self._candidates(elements, geometry, stats)

        if self.config.workers <= 1:
            for element in candidates:
                record = self._finish(element, self.classifier.classify(element.tags),
                                      geometry, stats)
                if record is not None:
                    yield record
            return

        workers = self.config.workers
        with _classifier_pool(self.classifier, workers) as executor:
            # One pool for the whole run, fed in bounded batches
            for batch in _chunks(candidates, DEFAULT_CHUNK_SIZE * workers):
                classes = _map_chunks(executor, [e.tags for e in batch],
                                      DEFAULT_CHUNK_SIZE)
                for element, class_name in zip(batch, classes):
                    record = self._finish(element, class_name, geometry, stats)
                    if record is not None:
                        yield record

    def process_file(self, osm_file_path: str) -> PipelineResult:
        """Parse and classify an OSM XML file.

        Args:
            osm_file_path: Path to OSM XML file

        Returns:
            PipelineResult with records and statistics

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(osm_file_path):
            raise FileNotFoundError(f"OSM file not found: {osm_file_path}")

        start_time = time.time()
        parser = OSMParser()
        geometry = ElementGeometry(parser.node_coordinates,
                                   self.config.way_requires_building)
        result = PipelineResult(source=osm_file_path)

        elements = parser.iter_elements(osm_file_path,
                                        include_relations=self.config.include_relations)
        result.records.extend(self.process_elements(elements, geometry, result.stats))
        result.stats.processing_time = time.time() - start_time

        logger.info("Classified %s: %d records from %d elements in %.2fs",
                    osm_file_path, result.stats.classified,
                    result.stats.elements_read, result.stats.processing_time)
        return result
