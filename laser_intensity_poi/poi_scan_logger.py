#!/usr/bin/env python3
import numpy as np
import rclpy
from rclpy.executors import ExternalShutdownException
from rclpy.node import Node
from sensor_msgs.msg import LaserScan

from laser_intensity_poi.window_scanner import (
    INTENSITY_THRESHOLD,
    WINDOW_WIDTH,
    InvalidFrame,
    check_settings,
    find_best_window,
    format_detection,
    scan_table,
)


class PoiScanLogger(Node):
    def __init__(self):
        super().__init__('poi_scan_logger')
        self.window_width = self.declare_parameter('window_width', WINDOW_WIDTH).value
        self.intensity_threshold = float(
            self.declare_parameter('intensity_threshold', INTENSITY_THRESHOLD).value
        )
        try:
            check_settings(self.window_width, self.intensity_threshold)
        except ValueError as e:
            self.get_logger().error(f"Invalid scanner parameters: {e}")
            raise
        self.output_file = self.declare_parameter('output_file', 'poi_scan_data.txt').value
        self.subscription = self.create_subscription(
            LaserScan,
            self.declare_parameter('scan_topic', '/laserScan').value,  # Change this to your LaserScan topic if different
            self.scan_callback,
            10)
        self.scan_received = False

    def scan_callback(self, msg):
        if self.scan_received:
            return
        self.get_logger().info(f"Received a LaserScan message. Writing to {self.output_file}...")

        try:
            data = scan_table(msg, self.window_width)
            result = find_best_window(msg, self.window_width, self.intensity_threshold)
        except InvalidFrame as e:
            self.get_logger().warning(f"Rejected malformed scan, waiting for the next one: {e}")
            return

        # Save to a text file (CSV format)
        np.savetxt(
            self.output_file,
            data,
            header="index,angle(rad),range(m),intensity,window_valid,window_score",
            comments='',
            delimiter=',',
            fmt=['%d', '%.6f', '%.6f', '%.6f', '%d', '%.6f']
        )

        self.scan_received = True
        if result is None:
            self.get_logger().info("No POI found in the logged scan")
        else:
            self.get_logger().info(f"POI in the logged scan: {format_detection(result)}")
        self.get_logger().info(f"Data written to {self.output_file}. Exiting...")
        rclpy.shutdown()


def main(args=None):
    rclpy.init(args=args)
    try:
        node = PoiScanLogger()
    except ValueError:
        rclpy.shutdown()
        return 1

    try:
        rclpy.spin(node)
    except (KeyboardInterrupt, ExternalShutdownException):
        pass

    node.destroy_node()


if __name__ == '__main__':
    main()
