import cv2
import argparse
import time

from camera_source import CameraSource
from timer import FPSTimer
from classifier.analyzer import ORTAnalyzer
from classifier.labels import format_label, load_labels
from classifier.session import create_session

MODEL_PATH = "models/mobilenet_v2.onnx"
LABELS_PATH = "models/imagenet_classes.txt"
CAMERA_INDEX = 0


class LatestResultSink:
    """Keeps the last Result for the overlay."""

    def __init__(self):
        self.result = None
        self.count = 0

    def on_result(self, result):
        self.result = result
        self.count += 1


def draw_result(image, result, labels, fps, mean_latency_ms=0.0):
    lines = []
    for idx, score in zip(result.detected_indices, result.detected_score):
        lines.append(f"{format_label(labels, idx)}: {score * 100.0:.1f}%")
    lines.append(f"{result.process_time_ms} ms (avg {mean_latency_ms:.1f} ms)")
    lines.append(f"FPS: {fps:.2f}")

    for i, text in enumerate(lines):
        cv2.putText(
            image,
            text,
            (20, 40 + 35 * i),
            cv2.FONT_HERSHEY_SIMPLEX,
            1.0,
            (0, 255, 0),
            2
        )
    return image


def parse_source(value):
    return int(value) if value.isdigit() else value


def parse_args():
    parser = argparse.ArgumentParser(description="Real-time top-3 image classification")
    parser.add_argument("--model", default=MODEL_PATH, help="ONNX model path, input [1,3,224,224]")
    parser.add_argument("--labels", default=LABELS_PATH, help="Class names, one per line")
    parser.add_argument("--source", default=str(CAMERA_INDEX), help="Camera index or video path")
    parser.add_argument(
        "--rotation",
        type=int,
        default=0,
        help="Sensor rotation in degrees applied to every frame"
    )
    parser.add_argument("--prefetch", type=int, default=0, help="Reader prefetch queue size (0 disables)")
    parser.add_argument("--max-frames", type=int, default=0, help="Stop after N frames (0 = unlimited)")
    parser.add_argument("--timing-interval", type=int, default=120, help="Frames between timing reports")
    parser.add_argument("--no-display", action="store_true", help="Disable cv2.imshow and print results instead")
    return parser.parse_args()


def main():
    args = parse_args()

    labels = load_labels(args.labels) if args.labels else []
    session = create_session(args.model)
    source = CameraSource(parse_source(args.source), rotation_degrees=args.rotation, prefetch=args.prefetch)
    sink = LatestResultSink()
    timer = FPSTimer()

    frame_idx = 0
    frame_ms_sum = 0.0

    try:
        with ORTAnalyzer(session, sink) as analyzer:
            while True:
                t0 = time.perf_counter()
                frame = source.read()
                if frame is None:
                    break

                display = frame.buffer
                result = analyzer.analyze(frame)
                fps = timer.update(result.process_time_ms if result is not None else None)
                t1 = time.perf_counter()

                frame_idx += 1
                frame_ms_sum += (t1 - t0) * 1000.0

                if args.no_display:
                    if result is not None and frame_idx % args.timing_interval == 0:
                        top = ", ".join(
                            f"{format_label(labels, i)}={s:.3f}"
                            for i, s in zip(result.detected_indices, result.detected_score)
                        )
                        print(f"[result] frame={frame_idx} {top}")
                elif display is not None and sink.result is not None:
                    overlay = draw_result(display.copy(), sink.result, labels, fps, timer.mean_latency_ms)
                    cv2.imshow("Classifier", overlay)
                    if cv2.waitKey(1) & 0xFF == 27:
                        break

                if frame_idx % args.timing_interval == 0:
                    print(
                        f"[timing] frames={frame_idx} "
                        f"frame={frame_ms_sum / frame_idx:.2f}ms "
                        f"infer={timer.mean_latency_ms:.2f}ms "
                        f"skipped={analyzer.skipped_frames} "
                        f"fps={fps:.2f}"
                    )

                if args.max_frames > 0 and frame_idx >= args.max_frames:
                    break
    finally:
        source.release()
        if not args.no_display:
            cv2.destroyAllWindows()

    print(f"Processed {sink.count} frames, released {source.frames_released}/{source.frames_read}")


if __name__ == "__main__":
    main()
