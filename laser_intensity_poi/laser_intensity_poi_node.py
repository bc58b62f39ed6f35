import copy

import rclpy
from rclpy.node import Node
from sensor_msgs.msg import LaserScan

from laser_intensity_poi.window_scanner import (
    INTENSITY_THRESHOLD,
    WINDOW_WIDTH,
    InvalidFrame,
    check_settings,
    find_best_window,
    format_detection,
    highlight_window,
)


class LaserIntensityPoi(Node):
    def __init__(self):
        super().__init__('laser_intensity_poi_node')

        self.get_logger().info("Starting laser_intensity_poi_node...")

        # Scanner tuning, defaults match the module constants
        self.window_width = self.declare_parameter('window_width', WINDOW_WIDTH).value
        self.intensity_threshold = float(
            self.declare_parameter('intensity_threshold', INTENSITY_THRESHOLD).value
        )
        try:
            check_settings(self.window_width, self.intensity_threshold)
        except ValueError as e:
            self.get_logger().error(f"Invalid scanner parameters: {e}")
            raise
        # Reporting and visualization flags
        self.enable_logging = self.declare_parameter('enable_logging', True).value
        self.enable_visualization = self.declare_parameter('enable_visualization', False).value
        scan_topic = self.declare_parameter('scan_topic', '/laserScan').value

        self.get_logger().info(
            f"""
Launching with parameters:
    - Window width: {self.window_width} beams
    - Intensity threshold: {self.intensity_threshold:g}
    - Logging {'enabled' if self.enable_logging else 'disabled'}
    - Visualization {'enabled' if self.enable_visualization else 'disabled'}
            """
        )
        self.get_logger().info(
            f"\n\rSubscribing to LiDAR scan data on '{scan_topic}'. \
                \n\rCreating publisher for POI visualizer on '/poi_scan'. \
            "
        )

        # # Subscribe to LiDAR scans
        self.lidar_sub = self.create_subscription(
            LaserScan, scan_topic, self.poi_callback, 10
        )
        # # Publisher for the highlighted POI window
        self.poi_scan_pub = self.create_publisher(
            LaserScan, '/poi_scan', 10
        )

    def poi_callback(self, scan):
        """
        Callback function for processing incoming LiDAR scan data.
        """
        try:
            result = find_best_window(scan, self.window_width, self.intensity_threshold)
        except InvalidFrame as e:
            self.get_logger().warning(f"Rejected malformed scan: {e}")
            return

        if result is None:
            self.get_logger().debug("No POI in this scan")
        elif self.enable_logging:
            self.get_logger().info(format_detection(result))

        self.publish_poi_scan(result, scan)

    def publish_poi_scan(self, result, raw_scan_data):
        """
        Publish the scan with everything but the POI window zeroed to the '/poi_scan' topic.

        Parameters:
            result (PoiWindow): Detected window, or None.
            raw_scan_data (LaserScan): Original LiDAR scan data.
        """
        if not self.enable_visualization:
            return

        # ROS 2 requires the ranges to be a list, not a NumPy array
        ranges = highlight_window(raw_scan_data.ranges, result, self.window_width).tolist()

        poi_scan = copy.deepcopy(raw_scan_data)
        poi_scan.ranges = ranges

        self.poi_scan_pub.publish(poi_scan)


def main(args=None):
    rclpy.init(args=args)
    try:
        node = LaserIntensityPoi()
    except ValueError:
        rclpy.shutdown()
        return 1

    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass

    node.destroy_node()
    rclpy.shutdown()


if __name__ == '__main__':
    main()
