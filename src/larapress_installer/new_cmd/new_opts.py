"""Options dataclass for the new command."""

import os
from dataclasses import dataclass

from larapress_installer.new_cmd.pipeline import PipelineConfig
from larapress_installer.new_cmd.release_fetcher import DEFAULT_RELEASE_URL, ReleaseChannel


@dataclass
class NewOpts:
    """All options for the new command."""

    name: str | None = None
    dev: bool = False
    force: bool = False
    no_ansi: bool = False
    release_url: str = DEFAULT_RELEASE_URL

    @property
    def channel(self):
        return ReleaseChannel.from_dev_flag(self.dev)

    def target_dir(self, working_dir):
        if self.name:
            return os.path.join(working_dir, self.name)
        return working_dir

    def pipeline_config(self, working_dir) -> PipelineConfig:
        working_dir = os.path.abspath(working_dir)
        return PipelineConfig(
            working_dir=working_dir,
            target_dir=self.target_dir(working_dir),
            channel=self.channel,
            force=self.force,
            no_ansi=self.no_ansi,
            release_url=self.release_url,
        )
