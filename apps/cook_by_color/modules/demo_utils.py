import random
import cv2
import numpy as np
from .color_sampler.loader import encode_png
from .color_sampler.pipeline import analyze_image
from .recipes import read_session, write_session


def hex_to_rgb(color_hex):
    return tuple(int(color_hex.lstrip('#')[i:i+2], 16) for i in (0, 2, 4))


def create_sample_dish_image(width, height, food_rgb, pan_rgb=(60, 60, 64), counter_rgb=(214, 206, 190), texture=18, seed=None):
    """
    Generate a photo-like image of a dish in a pan on a counter.

    The counter and pan are flat colors; the food fills the middle of the pan
    with random speckles of +/- texture so it carries detail the sampler favors.
    Returns an RGB uint8 array.
    """
    rng = random.Random(seed)

    # Drawing in RGB order, so colors are passed as-is
    image = np.full((height, width, 3), counter_rgb, dtype=np.uint8)

    center = (width // 2, height // 2)
    pan_radius = int(min(width, height) * 0.42)
    food_radius = int(pan_radius * 0.8)
    cv2.circle(image, center, pan_radius, tuple(int(c) for c in pan_rgb), -1)
    cv2.circle(image, center, food_radius, tuple(int(c) for c in food_rgb), -1)

    if texture > 0 and food_radius > 0:
        num_speckles = max(1, (food_radius * food_radius) // 12)
        for _ in range(num_speckles):
            angle = rng.uniform(0, 2 * np.pi)
            dist = food_radius * np.sqrt(rng.random())
            x = int(center[0] + dist * np.cos(angle))
            y = int(center[1] + dist * np.sin(angle))
            shift = rng.randint(-texture, texture)
            color = tuple(int(np.clip(c + shift, 0, 255)) for c in food_rgb)
            cv2.circle(image, (x, y), rng.randint(1, 2), color, -1)

    return image


def create_step_photo(step, width=480, height=360, seed=None):
    """
    PNG bytes of a sample photo whose food color is the step's expected average.
    """
    avg = step.expected_color_stats.avg_rgb
    image = create_sample_dish_image(width, height, (avg.r, avg.g, avg.b), seed=seed)
    return encode_png(image)


def generate_demo_session(session, recipe, **analysis_options):
    """
    Analyzes a generated photo for every step of the recipe and stores the
    results in the session. Returns the number of analyzed steps.
    """
    cooking_session = read_session(session, recipe.id)

    for index, step in enumerate(recipe.steps):
        photo = create_step_photo(step, seed=index)
        result = analyze_image(photo, step.expected_color_stats, **analysis_options)
        cooking_session = cooking_session.with_result(index, result)

    write_session(session, cooking_session)
    return len(recipe.steps)
