import os, sys, pytest
# Ensure backend directory is on path so 'tableside' can be imported from a source checkout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from tableside import create_app, get_db
from tableside.config.settings import Settings
from tableside.models.base import Base
# Import all model modules to ensure tables are registered before create_all
import tableside.models.vendor  # noqa: F401
import tableside.models.menu_item  # noqa: F401
import tableside.models.order  # noqa: F401
import tableside.models.audit  # noqa: F401
from tests.test_utils_seed import ensure_vendor


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    settings = Settings(jwt_secret_key='test-secret-key-with-enough-length', database_url='sqlite+pysqlite:///:memory:')
    app = create_app(settings, {'TESTING': True})
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def session(app_instance):
    s = get_db()
    yield s
    s.rollback()


@pytest.fixture()
def vendor(session):
    """A fresh shop per test keeps data from leaking between tests sharing the in-memory DB."""
    return ensure_vendor()


@pytest.fixture()
def other_vendor(session):
    return ensure_vendor()
