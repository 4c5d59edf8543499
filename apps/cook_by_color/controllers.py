import os
from py4web import action, request, response, abort, redirect, URL
from .common import session, T, cache, logger
from .settings import (
    RECIPES_FOLDER, ALLOWED_EXTENSIONS, MAX_IMAGE_DIMENSION, SAMPLE_STRIDE,
    VARIANCE_SCALE, EDGE_SCALE, ANALYSIS_WORKERS,
)
from .modules.color_sampler.loader import DecodeError, encode_png
from .modules.color_sampler.pipeline import analyze_image
from .modules.color_sampler.schemas import SamplingConfig
from .modules.recipes import (
    RecipeNotFound, load_recipes, get_recipe, step_index_for, bounded_step_index,
    CookingSession, read_session, write_session,
)
from .modules.demo_utils import create_sample_dish_image, create_step_photo, generate_demo_session, hex_to_rgb

ANALYSIS_ERROR = "Could not analyze the image. Please try a different photo."

ANALYSIS_OPTIONS = dict(
    sampling=SamplingConfig(stride=SAMPLE_STRIDE, variance_scale=VARIANCE_SCALE, edge_scale=EDGE_SCALE),
    max_dimension=MAX_IMAGE_DIMENSION,
    workers=ANALYSIS_WORKERS,
)


@cache.memoize(expiration=60)
def all_recipes():
    return load_recipes(RECIPES_FOLDER)


def recipe_or_404(recipe_id):
    try:
        return get_recipe(all_recipes(), recipe_id)
    except RecipeNotFound:
        abort(404, f"Recipe not found: {recipe_id}")


def step_or_404(recipe, step_number):
    try:
        return step_index_for(recipe, step_number)
    except RecipeNotFound:
        abort(404, "Step not found.")


# Dashboard
@action('index')
@action.uses(session, T)
def index():
    recipes = [
        dict(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            num_steps=len(recipe.steps),
            start_url=URL('recipes', recipe.id, 1),
        )
        for recipe in all_recipes()
    ]
    return dict(title=str(T("Cook by Color")), recipes=recipes)


@action('recipes/<recipe_id>')
@action.uses(session, T)
def recipe_overview(recipe_id):
    recipe = recipe_or_404(recipe_id)
    cooking_session = read_session(session, recipe.id)

    steps = []
    for index, step in enumerate(recipe.steps):
        result = cooking_session.result_for(index)
        steps.append(dict(
            number=index + 1,
            title=step.title,
            expected_hex=step.expected_color_stats.avg_rgb.hex,
            category=result.category.value if result else None,
        ))

    return dict(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        current_step=cooking_session.current_step + 1,
        steps=steps,
    )


@action('recipes/<recipe_id>/<step:int>')
@action.uses(session, T)
def recipe_step(recipe_id, step):
    recipe = recipe_or_404(recipe_id)
    step_index = step_or_404(recipe, step)
    current = recipe.steps[step_index]

    cooking_session = read_session(session, recipe.id).at_step(step_index)
    write_session(session, cooking_session)
    result = cooking_session.result_for(step_index)

    number = step_index + 1
    prev_number = bounded_step_index(recipe, number - 1) + 1
    next_number = bounded_step_index(recipe, number + 1) + 1

    return dict(
        recipe_id=recipe.id,
        recipe_title=recipe.title,
        step_number=number,
        total_steps=len(recipe.steps),
        step=current.to_dict(),
        expected_hex=current.expected_color_stats.avg_rgb.hex,
        result=result.to_dict() if result else None,
        measured_hex=result.average.hex if result else None,
        prev_step=prev_number if prev_number != number else None,
        next_step=next_number if next_number != number else None,
    )


@action('recipes/<recipe_id>/<step:int>/analyze', method='POST')
@action.uses(session)
def analyze_step(recipe_id, step):
    recipe = recipe_or_404(recipe_id)
    step_index = step_or_404(recipe, step)
    expected = recipe.steps[step_index].expected_color_stats

    uploaded_file = request.files.get('photo')
    if not uploaded_file or not uploaded_file.filename:
        return dict(error="No photo selected", result=None)

    ext = os.path.splitext(uploaded_file.filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        return dict(error="Invalid file type", result=None)

    try:
        result = analyze_image(uploaded_file.file.read(), expected, **ANALYSIS_OPTIONS)
    except DecodeError as e:
        logger.warning("Could not decode photo for %s step %d: %s", recipe.id, step, e)
        return dict(error=ANALYSIS_ERROR, result=None)
    except Exception as e:
        logger.exception("Analysis failed for %s step %d", recipe.id, step)
        return dict(error=str(e), result=None)

    cooking_session = read_session(session, recipe.id).with_result(step_index, result).at_step(step_index)
    write_session(session, cooking_session)

    return dict(
        error=None,
        step_number=step_index + 1,
        expected_hex=expected.avg_rgb.hex,
        measured_hex=result.average.hex,
        result=result.to_dict(),
    )


# Sample photo generator
@action('recipes/<recipe_id>/<step:int>/sample_photo')
def sample_photo(recipe_id, step):
    recipe = recipe_or_404(recipe_id)
    current = recipe.steps[step_or_404(recipe, step)]

    food_hex = request.params.get('food')
    try:
        if food_hex:
            image = create_sample_dish_image(480, 360, hex_to_rgb(food_hex), seed=step)
            photo = encode_png(image)
        else:
            photo = create_step_photo(current, seed=step)
    except ValueError:
        abort(400, "Invalid food color")

    response.headers['Content-Type'] = 'image/png'
    return photo


@action('recipes/<recipe_id>/populate_demo', method='POST')
@action.uses(session)
def populate_demo(recipe_id):
    recipe = recipe_or_404(recipe_id)
    generate_demo_session(session, recipe, **ANALYSIS_OPTIONS)
    redirect(URL('recipes', recipe.id))


@action('recipes/<recipe_id>/reset', method='POST')
@action.uses(session)
def reset_session(recipe_id):
    recipe = recipe_or_404(recipe_id)
    write_session(session, CookingSession(recipe_id=recipe.id))
    redirect(URL('recipes', recipe.id))
