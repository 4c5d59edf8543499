import os
import cv2
import numpy as np
import requests

# Configuration
BASE_URL = os.environ.get("TEST_BASE_URL", "http://127.0.0.1:8000/cook_by_color")
RECIPE_ID = "thai-red-curry"


def server_available():
    """True when a py4web server is answering at BASE_URL."""
    try:
        return requests.get(f"{BASE_URL}/index", timeout=2).status_code == 200
    except requests.RequestException:
        return False


def solid_image(width, height, rgb):
    """RGB uint8 image filled with a single color."""
    return np.full((height, width, 3), rgb, dtype=np.uint8)


def create_test_image(filename, width=200, height=200, rgb=(200, 60, 40)):
    """Creates a PNG of a colored disk on a light counter."""
    img = solid_image(width, height, (214, 206, 190))
    cv2.circle(img, (width // 2, height // 2), min(width, height) // 3, rgb, -1)
    cv2.imwrite(filename, cv2.cvtColor(img, cv2.COLOR_RGB2BGR))
    return filename


def png_bytes(rgb_image):
    ok, encoded = cv2.imencode('.png', cv2.cvtColor(rgb_image, cv2.COLOR_RGB2BGR))
    assert ok
    return encoded.tobytes()


def remove_test_image(filename):
    """Removes the test image if it exists."""
    if os.path.exists(filename):
        os.remove(filename)


def create_dummy_text_file(filename, content="dummy content"):
    """Creates a dummy text file."""
    with open(filename, 'w') as f:
        f.write(content)
    return filename
