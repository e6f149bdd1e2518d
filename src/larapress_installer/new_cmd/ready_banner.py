"""The message printed once a new application is ready."""

import jinja2

from larapress_installer.new_cmd.pipeline import app_url

BANNER_TEMPLATE = "application_ready.j2"

_environment = jinja2.Environment(
    loader=jinja2.PackageLoader("larapress_installer.new_cmd", "templates"),
    keep_trailing_newline=True,
)


def render_ready_banner(directory_name: str, in_working_dir: bool,
                        template_name: str = BANNER_TEMPLATE) -> str:
    """Render the closing banner for the application in ``directory_name``.

    The ``cd`` hint is left out when the application was created in the
    current directory.
    """
    template = _environment.get_template(template_name)
    return template.render(
        directory_name=directory_name,
        in_working_dir=in_working_dir,
        app_url=app_url(directory_name),
    )
