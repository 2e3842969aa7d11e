"""Robot interface: event handlers around the segmentation and visualization steps.

Pose events update the tracked sensor pose. Point clouds and elevation maps
are segmented from that pose; offline dataset presets bring their own
viewpoint. Every processed cloud publishes, in order: the look pose, the
re-stamped input cloud, the colored hull cloud and the hull line markers.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from collections.abc import Callable
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from planeseg_ri.core.contracts import (
    InterfaceConfig, LabeledCloud, Pose, SegmentationResult, StampedPose,
)
from planeseg_ri.core.dispatcher import EventDispatcher, EventKind
from planeseg_ri.core.pose_tracker import PoseTracker
from planeseg_ri.steps.s01_dataset_import.step import DatasetImportStep
from planeseg_ri.steps.s02_elevation_map.contracts import GridMap
from planeseg_ri.steps.s02_elevation_map.step import ElevationMapStep
from planeseg_ri.steps.s03_segmentation.contracts import BlockFitter, SegmentationInput
from planeseg_ri.steps.s03_segmentation.step import SegmentationStep
from planeseg_ri.steps.s04_hull_visualization.contracts import VisualizationOutput
from planeseg_ri.steps.s04_hull_visualization.step import HullVisualizationStep
from planeseg_ri.utils.io import dump_result_json

logger = logging.getLogger(__name__)


class Publisher(Protocol):
    def publish(self, topic: str, message: BaseModel) -> None: ...


class LatestPublisher:
    """Default publisher: keeps only the most recent message per topic."""

    def __init__(self) -> None:
        self.latest: dict[str, BaseModel] = {}

    def publish(self, topic: str, message: BaseModel) -> None:
        logger.debug(f"Publishing {type(message).__name__} on {topic}")
        self.latest[topic] = message


class RecordingPublisher:
    """Keeps every published message per topic. Grows without bound; for tests."""

    def __init__(self) -> None:
        self.messages: dict[str, list[BaseModel]] = defaultdict(list)

    def publish(self, topic: str, message: BaseModel) -> None:
        self.messages[topic].append(message)

    def count(self, topic: str) -> int:
        return len(self.messages.get(topic, ()))


class CycleOutput(BaseModel):
    """Everything produced for one processed cloud."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    result: SegmentationResult
    look_pose: StampedPose
    received_cloud: LabeledCloud
    visualization: VisualizationOutput


class RobotInterface:
    """Handlers for pose, point cloud and elevation map events.

    The fitter, publisher, pose tracker and clock are injected so the
    interface runs without a live transport.
    """

    def __init__(
        self,
        fitter: BlockFitter,
        config: InterfaceConfig | None = None,
        publisher: Publisher | None = None,
        pose_tracker: PoseTracker | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config if config is not None else InterfaceConfig()
        self.publisher = publisher if publisher is not None else LatestPublisher()
        self.pose_tracker = pose_tracker if pose_tracker is not None else PoseTracker()

        self.segmentation = SegmentationStep(fitter, self.config.segmentation, clock=clock)
        self.hull_visualization = HullVisualizationStep(self.config.hull_visualization)
        self.dataset_import = DatasetImportStep(self.config.dataset)
        self.elevation_map = ElevationMapStep(self.config.elevation_map)

        self.dispatcher = EventDispatcher(self.config.queue_size)
        self.dispatcher.register(EventKind.POSE, self.on_pose)
        self.dispatcher.register(EventKind.POINT_CLOUD, self.on_point_cloud)
        self.dispatcher.register(EventKind.ELEVATION_MAP, self.on_elevation_map)

    def subscriptions(self) -> dict[str, EventKind]:
        """Input stream name -> event kind, for binding a transport."""
        topics = self.config.topics
        return {
            topics.pose_in: EventKind.POSE,
            topics.point_cloud_in: EventKind.POINT_CLOUD,
            topics.elevation_map_in: EventKind.ELEVATION_MAP,
        }

    # ── Event handlers ───────────────────────────────────────────────

    def on_pose(self, pose: Pose | StampedPose) -> None:
        if isinstance(pose, StampedPose):
            pose = pose.pose
        self.pose_tracker.update(pose)

    def on_point_cloud(self, cloud: LabeledCloud) -> CycleOutput:
        return self.process_cloud(cloud)

    def on_elevation_map(self, grid_map: GridMap) -> CycleOutput:
        return self.process_cloud(self.elevation_map.convert(grid_map))

    # ── Processing ───────────────────────────────────────────────────

    def process_cloud(self, cloud: LabeledCloud, origin=None, look_dir=None) -> CycleOutput:
        """Segment ``cloud`` and publish every output.

        Without an explicit ``origin``/``look_dir`` the viewpoint comes from
        the latest tracked pose, whatever its age relative to the cloud.
        """
        if origin is None or look_dir is None:
            age = self.pose_tracker.age()
            if age is None:
                logger.debug("No pose received yet, segmenting from the identity pose")
            else:
                logger.debug(f"Segmenting from a pose received {age:.3f}s ago")
            inputs = SegmentationInput(cloud=cloud, sensor_pose=self.pose_tracker.read())
        else:
            inputs = SegmentationInput(cloud=cloud, origin=origin, look_dir=look_dir)

        seg = self.segmentation.execute(inputs)
        topics = self.config.topics
        self.publisher.publish(topics.look_pose, seg.look_pose)
        self.publisher.publish(topics.received_cloud, seg.received_cloud)

        if self.config.print_result_json:
            logger.info(f"Segmentation result:\n{dump_result_json(seg.result)}")

        visualization = self.publish_result(seg.result, seg.look_pose.stamp)
        return CycleOutput(
            result=seg.result,
            look_pose=seg.look_pose,
            received_cloud=seg.received_cloud,
            visualization=visualization,
        )

    def publish_result(self, result: SegmentationResult, stamp: float = 0.0) -> VisualizationOutput:
        visualization = self.hull_visualization.render(result, stamp=stamp)
        topics = self.config.topics
        self.publisher.publish(topics.hull_cloud, visualization.hull_cloud)
        self.publisher.publish(topics.hull_markers, visualization.hull_markers)
        return visualization

    def process_from_file(self, index: int) -> CycleOutput | None:
        """Run dataset preset ``index``; None if the preset could not be loaded."""
        loaded = self.dataset_import.load(index)
        if loaded is None:
            return None
        return self.process_cloud(loaded.cloud, origin=loaded.origin, look_dir=loaded.look_dir)

    def handle(self, kind: EventKind, payload: Any) -> Any:
        return self.dispatcher.dispatch(kind, payload)
