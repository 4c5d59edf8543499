import os

APP_NAME = 'cook_by_color'
APP_FOLDER = os.path.dirname(__file__)
T_FOLDER = os.path.join(APP_FOLDER, 'translations')
DB_FOLDER = os.path.join(APP_FOLDER, 'databases')
RECIPES_FOLDER = os.environ.get('COOK_BY_COLOR_RECIPES_FOLDER', os.path.join(APP_FOLDER, 'data', 'recipes'))

SESSION_SECRET = os.environ.get('COOK_BY_COLOR_SESSION_SECRET', 'my_secret_key')
LOG_LEVEL = os.environ.get('COOK_BY_COLOR_LOG_LEVEL', 'INFO')

# Analysis tuning
MAX_IMAGE_DIMENSION = int(os.environ.get('COOK_BY_COLOR_MAX_DIMENSION', 600))
SAMPLE_STRIDE = max(1, int(os.environ.get('COOK_BY_COLOR_SAMPLE_STRIDE', 2)))
VARIANCE_SCALE = float(os.environ.get('COOK_BY_COLOR_VARIANCE_SCALE', 10.0))
EDGE_SCALE = float(os.environ.get('COOK_BY_COLOR_EDGE_SCALE', 2.0))
ANALYSIS_WORKERS = int(os.environ.get('COOK_BY_COLOR_WORKERS', 1))

ALLOWED_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.webp', '.bmp']

if not os.path.exists(T_FOLDER):
    os.makedirs(T_FOLDER)

if not os.path.exists(DB_FOLDER):
    os.makedirs(DB_FOLDER)
