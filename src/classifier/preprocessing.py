import cv2
import numpy as np

from classifier.errors import ContractViolation, PreprocessingError

INPUT_SIZE = 224

IMAGENET_MEAN = np.array([0.485, 0.456, 0.406], dtype=np.float32)
IMAGENET_STD = np.array([0.229, 0.224, 0.225], dtype=np.float32)

_RIGHT_ANGLE_ROTATIONS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def normalize_imagenet(bitmap_bgr):
    """
    BGR uint8 (H, W, 3) -> RGB float32 (3, H, W), scaled to [0,1]
    then standardized with ImageNet mean/std.
    """
    rgb = cv2.cvtColor(bitmap_bgr, cv2.COLOR_BGR2RGB)
    image = rgb.astype(np.float32) * np.float32(1.0 / 255.0)
    image -= IMAGENET_MEAN
    image /= IMAGENET_STD
    return np.ascontiguousarray(np.transpose(image, (2, 0, 1)))


class FramePreprocessor:
    """
    Frame -> channel-first float32 buffer of shape (3, size, size).

    Steps: decode, resize to the model resolution, rotate by the frame's
    sensor rotation, then normalize via the injected normalizer.
    """

    def __init__(self, size=INPUT_SIZE, normalizer=normalize_imagenet):
        self.size = size
        self.normalizer = normalizer

    def resize(self, bitmap):
        # Nearest neighbour, same as an unfiltered bitmap scale
        return cv2.resize(bitmap, (self.size, self.size), interpolation=cv2.INTER_NEAREST)

    def rotate(self, bitmap, degrees):
        degrees = degrees % 360
        if degrees == 0:
            return bitmap
        if degrees in _RIGHT_ANGLE_ROTATIONS:
            return cv2.rotate(bitmap, _RIGHT_ANGLE_ROTATIONS[degrees])

        h, w = bitmap.shape[:2]
        # cv2 angles are counter-clockwise, sensor rotation is clockwise
        matrix = cv2.getRotationMatrix2D((w / 2.0, h / 2.0), -degrees, 1.0)
        return cv2.warpAffine(bitmap, matrix, (w, h), flags=cv2.INTER_NEAREST)

    def preprocess(self, frame):
        """
        Returns the normalized (3, size, size) float32 array, or None when
        the frame holds no decodable image.
        """
        try:
            bitmap = frame.to_bitmap()
        except PreprocessingError:
            return None
        if bitmap is None:
            return None

        bitmap = self.resize(bitmap)
        bitmap = self.rotate(bitmap, frame.rotation_degrees)

        image = np.asarray(self.normalizer(bitmap))
        expected = (3, self.size, self.size)
        if image.shape != expected:
            raise ContractViolation(
                f"Normalizer returned shape {image.shape}, expected {expected}"
            )
        return image.astype(np.float32, copy=False)
